"""
Render targets: the drawing surfaces the engine writes to.

Callers use top-left millimetre coordinates. PdfRenderTarget converts
them to the bottom-left point space of a ReportLab canvas.
"""

# Standard Library
import contextlib
import dataclasses
import io
import pathlib

# PIP3 modules
import PIL.Image
import reportlab.lib.utils
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfgen.canvas

# local repo modules
import product_catalog_pdf as pcp
import product_catalog_pdf.config


mm_to_points = pcp.config.mm_to_points
points_to_mm = pcp.config.points_to_mm


#============================================
def parse_hex_color(value: str) -> tuple[float, float, float]:
	"""
	Parse a hex color string into RGB floats.

	Args:
		value: Color string like "#AABBCC" or "#ABC".

	Returns:
		Tuple of (r, g, b) in 0.0-1.0 range, black when unparseable.
	"""
	if not value or not value.startswith("#"):
		return (0.0, 0.0, 0.0)
	digits = value[1:]
	if len(digits) == 3:
		digits = "".join(char * 2 for char in digits)
	if len(digits) != 6:
		return (0.0, 0.0, 0.0)
	try:
		red = int(digits[0:2], 16) / 255.0
		green = int(digits[2:4], 16) / 255.0
		blue = int(digits[4:6], 16) / 255.0
	except ValueError:
		return (0.0, 0.0, 0.0)
	return (red, green, blue)


#============================================
def text_width(text: str, font_name: str, font_size: float) -> float:
	"""
	Measure a text run.

	Args:
		text: Text content.
		font_name: ReportLab font name.
		font_size: Font size in points.

	Returns:
		Width in millimetres.
	"""
	return points_to_mm(reportlab.pdfbase.pdfmetrics.stringWidth(text, font_name, font_size))


#============================================
def font_ascent(font_name: str, font_size: float) -> float:
	"""
	Get the ascent of a font.

	Args:
		font_name: ReportLab font name.
		font_size: Font size in points.

	Returns:
		Ascent in millimetres.
	"""
	ascent = reportlab.pdfbase.pdfmetrics.getAscent(font_name) * font_size / 1000.0
	return points_to_mm(ascent)


class RenderTarget:
	"""
	Base drawing surface. Subclasses implement the primitives.
	"""

	def __init__(self, page_width: float, page_height: float):
		self.page_width = page_width
		self.page_height = page_height
		self.page_count = 0

	@property
	def page_index(self) -> int:
		return self.page_count - 1

	def new_page(self) -> int:
		raise NotImplementedError

	def draw_rect(
		self,
		x: float,
		y: float,
		width: float,
		height: float,
		fill_color: str | None = None,
		stroke_color: str | None = None,
		line_width: float = 0.0,
		radius: float = 0.0,
	) -> None:
		raise NotImplementedError

	def draw_circle(
		self,
		center_x: float,
		center_y: float,
		radius: float,
		fill_color: str | None = None,
		stroke_color: str | None = None,
		line_width: float = 0.0,
	) -> None:
		raise NotImplementedError

	def draw_line(
		self,
		x1: float,
		y1: float,
		x2: float,
		y2: float,
		color: str,
		line_width: float,
	) -> None:
		raise NotImplementedError

	def draw_text(
		self,
		x: float,
		baseline_y: float,
		text: str,
		font_name: str,
		font_size: float,
		color: str,
		align: str = "left",
	) -> None:
		raise NotImplementedError

	def draw_image(
		self,
		image: PIL.Image.Image,
		x: float,
		y: float,
		width: float,
		height: float,
	) -> None:
		raise NotImplementedError

	def transformed(
		self,
		opacity: float = 1.0,
		rotation: float = 0.0,
		center_x: float = 0.0,
		center_y: float = 0.0,
	):
		"""
		Context manager scoping opacity and rotation about a pivot.
		"""
		raise NotImplementedError

	def text_width(self, text: str, font_name: str, font_size: float) -> float:
		return text_width(text, font_name, font_size)

	def finish(self) -> None:
		raise NotImplementedError


class PdfRenderTarget(RenderTarget):
	"""
	ReportLab canvas target writing a multi-page PDF.
	"""

	def __init__(
		self,
		output: str | pathlib.Path | io.BytesIO,
		page_width: float,
		page_height: float,
		title: str | None = None,
	):
		super().__init__(page_width, page_height)
		if isinstance(output, pathlib.Path):
			output = str(output)
		self.pdf = reportlab.pdfgen.canvas.Canvas(
			output,
			pagesize=(mm_to_points(page_width), mm_to_points(page_height)),
		)
		if title:
			self.pdf.setTitle(title)

	def _x(self, value: float) -> float:
		return mm_to_points(value)

	def _y(self, value: float) -> float:
		return mm_to_points(self.page_height - value)

	def _set_fill(self, color: str) -> None:
		red, green, blue = parse_hex_color(color)
		self.pdf.setFillColorRGB(red, green, blue)

	def _set_stroke(self, color: str, line_width: float) -> None:
		red, green, blue = parse_hex_color(color)
		self.pdf.setStrokeColorRGB(red, green, blue)
		self.pdf.setLineWidth(mm_to_points(line_width))

	def new_page(self) -> int:
		if self.page_count > 0:
			self.pdf.showPage()
		self.page_count += 1
		return self.page_index

	def draw_rect(self, x, y, width, height, fill_color=None, stroke_color=None, line_width=0.0, radius=0.0):
		stroke = 1 if stroke_color and line_width > 0 else 0
		fill = 1 if fill_color else 0
		if not stroke and not fill:
			return
		if fill:
			self._set_fill(fill_color)
		if stroke:
			self._set_stroke(stroke_color, line_width)
		left = self._x(x)
		bottom = self._y(y + height)
		if radius > 0:
			self.pdf.roundRect(
				left,
				bottom,
				mm_to_points(width),
				mm_to_points(height),
				mm_to_points(radius),
				stroke=stroke,
				fill=fill,
			)
			return
		self.pdf.rect(left, bottom, mm_to_points(width), mm_to_points(height), stroke=stroke, fill=fill)

	def draw_circle(self, center_x, center_y, radius, fill_color=None, stroke_color=None, line_width=0.0):
		stroke = 1 if stroke_color and line_width > 0 else 0
		fill = 1 if fill_color else 0
		if not stroke and not fill:
			return
		if fill:
			self._set_fill(fill_color)
		if stroke:
			self._set_stroke(stroke_color, line_width)
		self.pdf.circle(self._x(center_x), self._y(center_y), mm_to_points(radius), stroke=stroke, fill=fill)

	def draw_line(self, x1, y1, x2, y2, color, line_width):
		self._set_stroke(color, line_width)
		self.pdf.line(self._x(x1), self._y(y1), self._x(x2), self._y(y2))

	def draw_text(self, x, baseline_y, text, font_name, font_size, color, align="left"):
		self.pdf.setFont(font_name, font_size)
		self._set_fill(color)
		normalized = align.strip().lower()
		if normalized == "center":
			self.pdf.drawCentredString(self._x(x), self._y(baseline_y), text)
		elif normalized == "right":
			self.pdf.drawRightString(self._x(x), self._y(baseline_y), text)
		else:
			self.pdf.drawString(self._x(x), self._y(baseline_y), text)

	def draw_image(self, image, x, y, width, height):
		image_reader = reportlab.lib.utils.ImageReader(image)
		self.pdf.drawImage(
			image_reader,
			self._x(x),
			self._y(y + height),
			width=mm_to_points(width),
			height=mm_to_points(height),
			mask="auto",
			preserveAspectRatio=False,
			anchor="sw",
		)

	@contextlib.contextmanager
	def transformed(self, opacity=1.0, rotation=0.0, center_x=0.0, center_y=0.0):
		self.pdf.saveState()
		try:
			if opacity < 1.0:
				alpha = max(0.0, opacity)
				self.pdf.setFillAlpha(alpha)
				self.pdf.setStrokeAlpha(alpha)
			if rotation:
				pivot_x = self._x(center_x)
				pivot_y = self._y(center_y)
				self.pdf.translate(pivot_x, pivot_y)
				# page y is flipped, so clockwise on screen is negative here
				self.pdf.rotate(-rotation)
				self.pdf.translate(-pivot_x, -pivot_y)
			yield
		finally:
			self.pdf.restoreState()

	def finish(self) -> None:
		self.pdf.save()


@dataclasses.dataclass
class DrawOp:
	kind: str
	page_index: int
	values: dict


class RecordingRenderTarget(RenderTarget):
	"""
	In-memory target that records every primitive as a DrawOp.
	"""

	def __init__(self, page_width: float, page_height: float):
		super().__init__(page_width, page_height)
		self.ops: list[DrawOp] = []
		self.finished = False
		self._state: list[tuple[float, float]] = [(1.0, 0.0)]

	def _record(self, kind: str, **values) -> None:
		opacity, rotation = self._state[-1]
		values["opacity"] = opacity
		values["rotation"] = rotation
		self.ops.append(DrawOp(kind=kind, page_index=self.page_index, values=values))

	def new_page(self) -> int:
		self.page_count += 1
		self._record("page")
		return self.page_index

	def draw_rect(self, x, y, width, height, fill_color=None, stroke_color=None, line_width=0.0, radius=0.0):
		self._record(
			"rect",
			x=x,
			y=y,
			width=width,
			height=height,
			fill_color=fill_color,
			stroke_color=stroke_color,
			line_width=line_width,
			radius=radius,
		)

	def draw_circle(self, center_x, center_y, radius, fill_color=None, stroke_color=None, line_width=0.0):
		self._record(
			"circle",
			center_x=center_x,
			center_y=center_y,
			radius=radius,
			fill_color=fill_color,
			stroke_color=stroke_color,
			line_width=line_width,
		)

	def draw_line(self, x1, y1, x2, y2, color, line_width):
		self._record("line", x1=x1, y1=y1, x2=x2, y2=y2, color=color, line_width=line_width)

	def draw_text(self, x, baseline_y, text, font_name, font_size, color, align="left"):
		self._record(
			"text",
			x=x,
			y=baseline_y,
			text=text,
			font_name=font_name,
			font_size=font_size,
			color=color,
			align=align,
		)

	def draw_image(self, image, x, y, width, height):
		self._record("image", x=x, y=y, width=width, height=height, size=image.size, mode=image.mode)

	@contextlib.contextmanager
	def transformed(self, opacity=1.0, rotation=0.0, center_x=0.0, center_y=0.0):
		parent_opacity, parent_rotation = self._state[-1]
		self._state.append((parent_opacity * opacity, parent_rotation + rotation))
		try:
			yield
		finally:
			self._state.pop()

	def finish(self) -> None:
		self.finished = True

	def ops_of_kind(self, kind: str) -> list[DrawOp]:
		return [op for op in self.ops if op.kind == kind]
