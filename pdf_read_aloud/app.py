"""Tkinter screen: select a PDF, set the speech speed, play and stop."""

from __future__ import annotations

import tkinter as tk
import tkinter.filedialog
from tkinter import ttk

from .core import ReaderSession
from .speaker import MAX_SPEECH_RATE, MIN_SPEECH_RATE, SPEECH_RATE_STEP


class ReaderApp(tk.Tk):
    """
    A single-screen PDF reader that reads the selected document aloud.
    """

    def __init__(self, session: ReaderSession):
        """Builds the window and binds its controls to *session*."""
        super().__init__()

        self.title("PDF to Speech")
        self.geometry("420x260")

        self.session = session
        self.session.on_change = self._schedule_refresh

        # --- Layout Frames ---
        main_frame = ttk.Frame(self, padding=16)
        main_frame.pack(fill=tk.BOTH, expand=True)

        rate_frame = ttk.Frame(main_frame)
        rate_frame.pack(fill=tk.X, pady=16)

        control_frame = ttk.Frame(main_frame)
        control_frame.pack()

        # --- Widgets ---
        self.select_button = ttk.Button(
            main_frame,
            text="Select PDF",
            command=self.select_pdf
        )
        self.select_button.pack(before=rate_frame)

        self.rate_label = ttk.Label(rate_frame)
        self.rate_label.pack()

        # tk.Scale rather than ttk.Scale: only the former snaps to a resolution.
        self.rate_var = tk.DoubleVar(value=session.speech_rate)
        self.rate_slider = tk.Scale(
            rate_frame,
            from_=MIN_SPEECH_RATE, to=MAX_SPEECH_RATE,
            resolution=SPEECH_RATE_STEP,
            variable=self.rate_var,
            orient=tk.HORIZONTAL,
            showvalue=False,
            command=self.on_rate_change
        )
        self.rate_slider.pack(fill=tk.X)

        self.play_button = ttk.Button(
            control_frame,
            text="Play Audio",
            command=self.session.play
        )
        self.play_button.pack(side=tk.LEFT, padx=8)

        self.stop_button = ttk.Button(
            control_frame,
            text="Stop Audio",
            command=self.session.stop
        )
        self.stop_button.pack(side=tk.LEFT, padx=8)

        self.status_label = ttk.Label(main_frame, wraplength=380)
        self.status_label.pack(pady=16)

        self.protocol("WM_DELETE_WINDOW", self.on_close)
        self.refresh()

    def select_pdf(self):
        """Prompts for a PDF file and loads it into the session."""
        pdf_path = tkinter.filedialog.askopenfilename(
            title="Select PDF file",
            filetypes=[("PDF files", "*.pdf")]
        )
        if not pdf_path:
            return
        self.session.load(pdf_path)

    def on_rate_change(self, value):
        self.session.set_speech_rate(float(value))

    def refresh(self):
        """Syncs labels and button states with the session."""
        self.rate_label.config(text=f"Speech Speed: {self.session.speech_rate:.1f}x")
        self.play_button.state(["!disabled"] if self.session.can_play else ["disabled"])
        self.stop_button.state(["!disabled"] if self.session.can_stop else ["disabled"])
        self.status_label.config(text=self.session.status)

    def _schedule_refresh(self):
        # Session changes may come from the playback thread.
        self.after(0, self.refresh)

    def on_close(self):
        self.session.stop()
        self.session.speaker.engine.shutdown()
        self.destroy()
