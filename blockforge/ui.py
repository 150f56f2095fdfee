"""Minimal Tkinter UI with live preview for blockforge.

Provides a desktop UI to:
- Load an image
- Adjust block size, shape, sampling, color effect, palette size and grid
- Apply, save and delete presets
- See a live preview (pixelated at native size, shown fitted to the window)
- Export watermarked PNGs at 1x, 2x or 4x, or all three

This UI uses only the project's existing dependencies (Pillow, NumPy) and
the standard library (tkinter). Previews are computed on a worker thread and
only the newest request is ever shown.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image, ImageTk

import tkinter as tk
from tkinter import colorchooser, filedialog, messagebox, simpledialog, ttk

from .effects import format_hex_color, parse_hex_color
from .errors import BlockforgeError
from .export import BATCH_SCALES, export_batch, export_filename
from .presets import PresetStore, all_presets, find_preset
from .preview import PreviewGate, render_preview
from .settings import COLOR_EFFECTS, SAMPLING_MODES, SHAPES, PixelSettings
from .utils.loader import DEFAULT_CODEC, read_image_bytes


def _to_pil(arr: np.ndarray) -> Image.Image:
    return Image.fromarray(arr)


def _fit_preview(im: Image.Image, max_w: int, max_h: int) -> Image.Image:
    w, h = im.size
    scale = min(max_w / max(w, 1), max_h / max(h, 1))
    if scale >= 1.0:
        return im.copy()
    new_w, new_h = max(1, int(w * scale)), max(1, int(h * scale))
    # Use nearest so pixel edges stay crisp in preview
    return im.resize((new_w, new_h), resample=Image.NEAREST)


@dataclass
class UIState:
    image_path: Optional[Path] = None
    image_bytes: Optional[bytes] = None  # encoded source, re-decoded for every export
    image_full: Optional[np.ndarray] = None  # pristine RGBA source, never modified
    debounce_ms: int = 150


class App:
    def __init__(self, root: tk.Tk, store: Optional[PresetStore] = None) -> None:
        self.root = root
        self.root.title("blockforge")
        self.state = UIState()
        self.store = store or PresetStore()
        self.gate = PreviewGate()

        defaults = PixelSettings()
        self.var_pixel = tk.IntVar(value=defaults.pixel_size)
        self.var_shape = tk.StringVar(value=defaults.shape)
        self.var_sampling = tk.StringVar(value=defaults.sampling)
        self.var_effect = tk.StringVar(value=defaults.color_effect)
        self.var_colors = tk.IntVar(value=defaults.palette_size)
        self.var_levels = tk.IntVar(value=4)
        self.var_grid = tk.BooleanVar(value=defaults.show_grid)
        self.var_color1 = tk.StringVar(value="#1a1a2e")
        self.var_color2 = tk.StringVar(value="#ff006e")
        self.var_preset = tk.StringVar(value="")

        self._build_ui()
        self._pending_update: Optional[str] = None
        self._preview_imgtk: Optional[ImageTk.PhotoImage] = None

    def _build_ui(self) -> None:
        frm = ttk.Frame(self.root, padding=8)
        frm.grid(row=0, column=0, sticky="nsew")
        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(0, weight=1)

        top = ttk.Frame(frm)
        top.grid(row=0, column=0, sticky="ew", pady=(0, 4))

        ttk.Button(top, text="Open…", command=self.on_open).grid(row=0, column=0, padx=(0, 8))

        ttk.Label(top, text="Pixel").grid(row=0, column=1)
        s_pixel = ttk.Spinbox(top, from_=1, to=100, textvariable=self.var_pixel, width=5, command=self.on_params_changed)
        s_pixel.grid(row=0, column=2, padx=(4, 12))

        ttk.Label(top, text="Shape").grid(row=0, column=3)
        cb_shape = ttk.Combobox(top, values=SHAPES, textvariable=self.var_shape, width=9, state="readonly")
        cb_shape.grid(row=0, column=4, padx=(4, 12))
        cb_shape.bind("<<ComboboxSelected>>", lambda e: self.on_params_changed())

        ttk.Label(top, text="Sampling").grid(row=0, column=5)
        cb_sampling = ttk.Combobox(top, values=SAMPLING_MODES, textvariable=self.var_sampling, width=9, state="readonly")
        cb_sampling.grid(row=0, column=6, padx=(4, 12))
        cb_sampling.bind("<<ComboboxSelected>>", lambda e: self.on_params_changed())

        ttk.Label(top, text="Colors").grid(row=0, column=7)
        s_colors = ttk.Spinbox(top, from_=2, to=256, textvariable=self.var_colors, width=5, command=self.on_params_changed)
        s_colors.grid(row=0, column=8, padx=(4, 12))

        ttk.Checkbutton(top, text="Grid", variable=self.var_grid, command=self.on_params_changed).grid(row=0, column=9)

        fx = ttk.Frame(frm)
        fx.grid(row=1, column=0, sticky="ew", pady=(0, 4))

        ttk.Label(fx, text="Effect").grid(row=0, column=0)
        cb_effect = ttk.Combobox(fx, values=COLOR_EFFECTS, textvariable=self.var_effect, width=10, state="readonly")
        cb_effect.grid(row=0, column=1, padx=(4, 12))
        cb_effect.bind("<<ComboboxSelected>>", lambda e: self.on_params_changed())

        ttk.Label(fx, text="Levels").grid(row=0, column=2)
        s_levels = ttk.Spinbox(fx, from_=2, to=8, textvariable=self.var_levels, width=4, command=self.on_params_changed)
        s_levels.grid(row=0, column=3, padx=(4, 12))

        ttk.Button(fx, text="Dark…", command=lambda: self.on_pick_color(self.var_color1)).grid(row=0, column=4)
        ttk.Label(fx, textvariable=self.var_color1, width=8).grid(row=0, column=5, padx=(4, 8))
        ttk.Button(fx, text="Light…", command=lambda: self.on_pick_color(self.var_color2)).grid(row=0, column=6)
        ttk.Label(fx, textvariable=self.var_color2, width=8).grid(row=0, column=7, padx=(4, 12))

        ttk.Label(fx, text="Preset").grid(row=0, column=8)
        self.cb_preset = ttk.Combobox(fx, textvariable=self.var_preset, width=16, state="readonly")
        self.cb_preset.grid(row=0, column=9, padx=(4, 4))
        self.cb_preset.bind("<<ComboboxSelected>>", lambda e: self.on_apply_preset())
        ttk.Button(fx, text="Save…", command=self.on_save_preset).grid(row=0, column=10, padx=(0, 4))
        ttk.Button(fx, text="Delete", command=self.on_delete_preset).grid(row=0, column=11)
        self._refresh_presets()

        exp = ttk.Frame(frm)
        exp.grid(row=2, column=0, sticky="ew", pady=(0, 8))
        for col, scale in enumerate(BATCH_SCALES):
            ttk.Button(exp, text=f"Export {scale}×…", command=lambda s=scale: self.on_export(s)).grid(row=0, column=col, padx=(0, 8))
        ttk.Button(exp, text="Export all…", command=self.on_export_batch).grid(row=0, column=len(BATCH_SCALES))

        # Preview area
        self.canvas = tk.Canvas(frm, bg="#222", width=800, height=600)
        self.canvas.grid(row=3, column=0, sticky="nsew")
        frm.rowconfigure(3, weight=1)
        frm.columnconfigure(0, weight=1)

    def current_settings(self) -> PixelSettings:
        effect = self.var_effect.get()
        return PixelSettings(
            pixel_size=max(1, int(self.var_pixel.get())),
            shape=self.var_shape.get(),  # type: ignore[arg-type]
            sampling=self.var_sampling.get(),  # type: ignore[arg-type]
            color_effect=effect,  # type: ignore[arg-type]
            palette_size=min(256, max(2, int(self.var_colors.get()))),
            show_grid=bool(self.var_grid.get()),
            duotone_color1=parse_hex_color(self.var_color1.get()),
            duotone_color2=parse_hex_color(self.var_color2.get()),
            posterize_levels=min(8, max(2, int(self.var_levels.get()))),
        )

    def _load_settings(self, settings: PixelSettings) -> None:
        self.var_pixel.set(settings.pixel_size)
        self.var_shape.set(settings.shape)
        self.var_sampling.set(settings.sampling)
        self.var_effect.set(settings.color_effect)
        self.var_colors.set(settings.palette_size)
        self.var_grid.set(settings.show_grid)
        if settings.posterize_levels is not None:
            self.var_levels.set(settings.posterize_levels)
        if settings.duotone_color1 is not None:
            self.var_color1.set(format_hex_color(settings.duotone_color1))
        if settings.duotone_color2 is not None:
            self.var_color2.set(format_hex_color(settings.duotone_color2))

    def _refresh_presets(self) -> None:
        self.cb_preset["values"] = [p.name for p in all_presets(self.store)]

    def on_apply_preset(self) -> None:
        try:
            preset = find_preset(self.var_preset.get(), self.store)
        except KeyError:
            return
        self._load_settings(preset.settings)
        self._trigger_update()

    def on_save_preset(self) -> None:
        name = simpledialog.askstring("Save preset", "Preset name:", parent=self.root)
        if not name:
            return
        try:
            self.store.save(name, self.current_settings())
        except (OSError, ValueError) as e:
            messagebox.showerror("Save failed", str(e))
            return
        self._refresh_presets()
        self.var_preset.set(name.strip())

    def on_delete_preset(self) -> None:
        name = self.var_preset.get()
        if not name:
            return
        try:
            self.store.delete(name)
        except KeyError:
            messagebox.showinfo("Built-in preset", f"{name!r} is not a user preset.")
            return
        except OSError as e:
            messagebox.showerror("Delete failed", str(e))
            return
        self.var_preset.set("")
        self._refresh_presets()

    def on_pick_color(self, var: tk.StringVar) -> None:
        _, hex_color = colorchooser.askcolor(color=var.get(), parent=self.root)
        if hex_color:
            var.set(hex_color.lower())
            self.on_params_changed()

    def on_open(self) -> None:
        path = filedialog.askopenfilename(
            title="Open image",
            filetypes=[("Images", "*.png *.jpg *.jpeg *.gif"), ("All", "*.*")],
        )
        if not path:
            return
        try:
            data = read_image_bytes(path)
            arr = DEFAULT_CODEC.decode(data)
        except (OSError, ValueError, BlockforgeError) as e:
            messagebox.showerror("Open failed", str(e))
            return
        self.state.image_path = Path(path)
        self.state.image_bytes = data
        self.state.image_full = arr
        self._trigger_update()

    def on_export(self, scale: int) -> None:
        if self.state.image_bytes is None or self.state.image_path is None:
            messagebox.showinfo("No image", "Open an image first.")
            return
        out = filedialog.asksaveasfilename(
            defaultextension=".png",
            initialfile=export_filename(scale, self.state.image_path.stem),
            filetypes=[("PNG", ".png"), ("All", "*.*")],
        )
        if not out:
            return
        self._write_exports([scale], {scale: Path(out)})

    def on_export_batch(self) -> None:
        if self.state.image_bytes is None or self.state.image_path is None:
            messagebox.showinfo("No image", "Open an image first.")
            return
        folder = filedialog.askdirectory(title="Export folder")
        if not folder:
            return
        stem = self.state.image_path.stem
        paths = {s: Path(folder) / export_filename(s, stem) for s in BATCH_SCALES}
        self._write_exports(list(BATCH_SCALES), paths)

    def _write_exports(self, scales: list[int], paths: dict[int, Path]) -> None:
        try:
            settings = self.current_settings()
        except ValueError as e:
            messagebox.showerror("Invalid settings", str(e))
            return
        written, failed = [], []
        for result in export_batch(self.state.image_bytes, settings, scales):  # type: ignore[arg-type]
            if result.ok:
                try:
                    paths[result.scale].write_bytes(result.data)  # type: ignore[arg-type]
                    written.append(f"{result.scale}×")
                    continue
                except OSError as e:
                    result.error = e
            failed.append(f"{result.scale}×: {result.error}")
        if failed:
            messagebox.showerror("Export failed", "\n".join(failed))
        if written:
            messagebox.showinfo("Exported", f"Downloaded {', '.join(written)} resolution")

    def on_params_changed(self) -> None:
        self._trigger_update()

    def _trigger_update(self) -> None:
        # Debounce UI changes to avoid recomputing too frequently
        if self._pending_update is not None:
            self.root.after_cancel(self._pending_update)
        self._pending_update = self.root.after(self.state.debounce_ms, self._start_worker)  # type: ignore

    def _start_worker(self) -> None:
        self._pending_update = None
        src = self.state.image_full
        if src is None:
            return
        try:
            settings = self.current_settings()
        except (ValueError, tk.TclError) as e:
            self._show_error(str(e))
            return
        ticket = self.gate.next_ticket()
        worker = threading.Thread(target=self._compute_preview, args=(ticket, src, settings), daemon=True)
        worker.start()

    def _compute_preview(self, ticket: int, src: np.ndarray, settings: PixelSettings) -> None:
        try:
            out = render_preview(src, settings)
        except (ValueError, BlockforgeError) as e:
            msg = str(e)
            self.root.after(0, lambda: self.gate.apply(ticket, self._show_error, msg))
            return
        if not self.gate.is_current(ticket):
            return
        self.root.after(0, lambda: self.gate.apply(ticket, self._update_canvas, out))

    def _update_canvas(self, out: np.ndarray) -> None:
        w = max(1, self.canvas.winfo_width())
        h = max(1, self.canvas.winfo_height())
        pil = _fit_preview(_to_pil(out), w, h)
        imgtk = ImageTk.PhotoImage(pil)
        self._preview_imgtk = imgtk  # keep reference to prevent GC
        self.canvas.delete("all")
        x = max(0, (w - imgtk.width()) // 2)
        y = max(0, (h - imgtk.height()) // 2)
        self.canvas.create_image(x, y, anchor="nw", image=imgtk)

    def _show_error(self, msg: str) -> None:
        self.canvas.delete("all")
        self.canvas.create_text(10, 10, anchor="nw", fill="#fff", text=f"Error: {msg}")


def run_ui() -> None:
    root = tk.Tk()
    App(root)
    root.minsize(640, 480)
    root.mainloop()


if __name__ == "__main__":  # pragma: no cover
    run_ui()
