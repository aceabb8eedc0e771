"""
PNG preview of a routed frame.

Draws node boxes, routes, ports and (optionally) the bend handle of a
selected connection with Pillow. This is a debugging aid for inspecting
routing decisions; the editor draws frames with its own canvas.
"""

import os
from typing import Iterable, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .bend import handle_for_route
from .config import GRID_SIZE
from .pipeline import RenderFrame


class FramePreview:
    """Renders a RenderFrame as a PNG image."""

    def __init__(
        self,
        scale: int = 2,
        margin: int = 40,
        font_size: int = 9,
        font_path: Optional[str] = None,
        show_grid: bool = True,
        show_ports: bool = True,
    ):
        self.scale = scale
        self.margin = margin
        self.font_size = font_size
        self.font_path = font_path
        self.show_grid = show_grid
        self.show_ports = show_ports

        # Colors
        self.bg_color = (255, 255, 255)
        self.grid_color = (214, 219, 226)
        self.box_fill = (248, 250, 252)
        self.box_outline = (71, 85, 105)
        self.text_color = (15, 23, 42)
        self.line_color = (148, 163, 184)
        self.selected_color = (59, 130, 246)
        self.port_color = (220, 38, 38)

        self.font = None

    def _get_font(self) -> ImageFont.ImageFont:
        """Get a font for node labels."""
        if self.font is not None:
            return self.font

        font_size = self.font_size * self.scale
        candidates = []
        if self.font_path:
            candidates.append(self.font_path)
        candidates.extend(
            [
                "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
                "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
                "/System/Library/Fonts/Menlo.ttc",
                "C:/Windows/Fonts/consola.ttf",
            ]
        )

        for path in candidates:
            if os.path.exists(path):
                try:
                    self.font = ImageFont.truetype(path, font_size)
                    return self.font
                except OSError:
                    continue

        try:
            self.font = ImageFont.load_default(size=font_size)
        except TypeError:
            # Older Pillow versions don't support size parameter
            self.font = ImageFont.load_default()
        return self.font

    def _bounds(self, frame: RenderFrame) -> Tuple[float, float, float, float]:
        xs, ys = [], []
        for rect in frame.rects.values():
            xs.extend([rect.x, rect.right])
            ys.extend([rect.y, rect.bottom])
        for points in frame.routes.values():
            for x, y in points:
                xs.append(x)
                ys.append(y)
        if not xs:
            return 0, 0, 0, 0
        return min(xs), min(ys), max(xs), max(ys)

    def render_image(
        self, frame: RenderFrame, selected: Iterable[str] = ()
    ) -> Image.Image:
        """
        Draw the frame into a new image.

        Args:
            frame: Frame to draw.
            selected: Connection ids to highlight; each gets a bend handle.

        Returns:
            The Pillow image.
        """
        selected = set(selected)
        min_x, min_y, max_x, max_y = self._bounds(frame)
        s = self.scale
        width = int((max_x - min_x + 2 * self.margin) * s) + 1
        height = int((max_y - min_y + 2 * self.margin) * s) + 1

        img = Image.new("RGB", (width, height), self.bg_color)
        draw = ImageDraw.Draw(img)

        def to_px(x: float, y: float) -> Tuple[float, float]:
            return ((x - min_x + self.margin) * s, (y - min_y + self.margin) * s)

        if self.show_grid:
            self._draw_grid(draw, min_x, min_y, max_x, max_y, to_px)

        for node_id, rect in frame.rects.items():
            x1, y1 = to_px(rect.x, rect.y)
            x2, y2 = to_px(rect.right, rect.bottom)
            draw.rectangle(
                [x1, y1, x2, y2], fill=self.box_fill, outline=self.box_outline, width=s
            )
            draw.text(
                (x1 + 2 * s, y1 + 2 * s),
                node_id,
                font=self._get_font(),
                fill=self.text_color,
            )

        for conn_id, points in frame.routes.items():
            color = self.selected_color if conn_id in selected else self.line_color
            if len(points) >= 2:
                draw.line(
                    [to_px(x, y) for x, y in points],
                    fill=color,
                    width=2 * s,
                    joint="curve",
                )

        if self.show_ports:
            r = 1.5 * s
            for pair in frame.ports.values():
                for port in (pair.start, pair.end):
                    px, py = to_px(port.x, port.y)
                    draw.ellipse(
                        [px - r, py - r, px + r, py + r], fill=self.port_color
                    )

        for conn_id in selected:
            handle = handle_for_route(conn_id, frame.route(conn_id))
            if handle is None:
                continue
            hx, hy = to_px(handle.x, handle.y)
            r = 6 * s
            draw.ellipse(
                [hx - r, hy - r, hx + r, hy + r],
                fill=self.bg_color,
                outline=self.selected_color,
                width=s,
            )

        return img

    def _draw_grid(self, draw, min_x, min_y, max_x, max_y, to_px) -> None:
        """Dot grid at the base position grid."""
        start_x = (int(min_x - self.margin) // GRID_SIZE) * GRID_SIZE
        start_y = (int(min_y - self.margin) // GRID_SIZE) * GRID_SIZE
        y = start_y
        while y <= max_y + self.margin:
            x = start_x
            while x <= max_x + self.margin:
                px, py = to_px(x, y)
                draw.point((px, py), fill=self.grid_color)
                x += GRID_SIZE
            y += GRID_SIZE

    def render(
        self,
        frame: RenderFrame,
        output_path: str = "routes.png",
        selected: Iterable[str] = (),
    ) -> str:
        """
        Render the frame and save it as a PNG file.

        Returns:
            Path to the saved PNG file
        """
        img = self.render_image(frame, selected)
        img.save(output_path, "PNG")
        return output_path


def render_frame_to_png(
    frame: RenderFrame,
    output_path: str = "routes.png",
    selected: Optional[Iterable[str]] = None,
    **kwargs,
) -> str:
    """Convenience wrapper around FramePreview.render."""
    return FramePreview(**kwargs).render(frame, output_path, selected or ())
