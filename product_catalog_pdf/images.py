"""
Image loading and circular cropping.
"""

# Standard Library
import asyncio
import base64
import io
import math
import pathlib

# PIP3 modules
import httpx
import PIL.Image
import PIL.ImageDraw

# local repo modules
import product_catalog_pdf as pcp
import product_catalog_pdf.config


IMAGE_FETCH_TIMEOUT = pcp.config.IMAGE_FETCH_TIMEOUT
MASK_SUPERSAMPLE = pcp.config.MASK_SUPERSAMPLE


class ImageLoadError(Exception):
	"""
	Raised when an image source cannot be fetched or decoded.
	"""


#============================================
def decode_image_bytes(data: bytes) -> PIL.Image.Image:
	"""
	Decode raw bytes into a fully loaded Pillow image.

	Args:
		data: Encoded image bytes.

	Returns:
		Loaded image.
	"""
	image = PIL.Image.open(io.BytesIO(data))
	image.load()
	return image


#============================================
def decode_data_url(source: str) -> bytes:
	"""
	Decode a data: URL payload.

	Args:
		source: Data URL such as "data:image/png;base64,....".

	Returns:
		Payload bytes.
	"""
	header, _, payload = source.partition(",")
	if not payload:
		raise ValueError("data URL has no payload")
	if header.endswith(";base64"):
		return base64.b64decode(payload, validate=True)
	return payload.encode("utf-8")


class ImageLoader:
	"""
	Async image loader with a per-run cache.

	Sources may be http(s) URLs, data: URLs, or local file paths. Failed
	sources are cached too, so a broken photo is only attempted once.
	"""

	def __init__(self, timeout: float = IMAGE_FETCH_TIMEOUT, client: httpx.AsyncClient | None = None):
		self.timeout = timeout
		self._client = client
		self._owns_client = client is None
		self._cache: dict[str, PIL.Image.Image | ImageLoadError] = {}

	async def _fetch_bytes(self, source: str) -> bytes:
		if source.startswith("data:"):
			return decode_data_url(source)
		if source.startswith("http://") or source.startswith("https://"):
			if self._client is None:
				self._client = httpx.AsyncClient(
					timeout=httpx.Timeout(self.timeout),
					follow_redirects=True,
				)
			response = await self._client.get(source)
			response.raise_for_status()
			return response.content
		path = pathlib.Path(source)
		return await asyncio.to_thread(path.read_bytes)

	async def load(self, source: str) -> PIL.Image.Image:
		"""
		Load and decode an image.

		Args:
			source: Image source.

		Returns:
			Decoded image.

		Raises:
			ImageLoadError: When fetching or decoding fails.
		"""
		cached = self._cache.get(source)
		if isinstance(cached, ImageLoadError):
			raise cached
		if cached is not None:
			return cached
		try:
			data = await self._fetch_bytes(source)
			image = await asyncio.to_thread(decode_image_bytes, data)
		except (httpx.HTTPError, OSError, ValueError) as error:
			failure = ImageLoadError(f"{source[:80]}: {error}")
			self._cache[source] = failure
			raise failure from error
		self._cache[source] = image
		return image

	async def aclose(self) -> None:
		if self._client is not None and self._owns_client:
			await self._client.aclose()
		self._client = None


#============================================
def compute_cover_size(
	source_width: int,
	source_height: int,
	target_width: int,
	target_height: int,
) -> tuple[int, int]:
	"""
	Compute a cover-fit size that fills the target without letterboxing.

	Args:
		source_width: Source width in pixels.
		source_height: Source height in pixels.
		target_width: Target width in pixels.
		target_height: Target height in pixels.

	Returns:
		Scaled (width, height), each at least the target dimension.
	"""
	source_width = max(1, source_width)
	source_height = max(1, source_height)
	scale = max(target_width / source_width, target_height / source_height)
	width = max(target_width, math.ceil(source_width * scale))
	height = max(target_height, math.ceil(source_height * scale))
	return (width, height)


#============================================
def build_circle_mask(size: int, inset: int) -> PIL.Image.Image:
	"""
	Build an anti-aliased circular alpha mask.

	Args:
		size: Mask edge in pixels.
		inset: Pixels between the mask edge and the circle.

	Returns:
		Mode "L" mask image.
	"""
	big = size * MASK_SUPERSAMPLE
	big_inset = inset * MASK_SUPERSAMPLE
	mask = PIL.Image.new("L", (big, big), 0)
	draw = PIL.ImageDraw.Draw(mask)
	draw.ellipse((big_inset, big_inset, big - 1 - big_inset, big - 1 - big_inset), fill=255)
	return mask.resize((size, size), PIL.Image.Resampling.LANCZOS)


#============================================
def crop_circular(
	image: PIL.Image.Image,
	target_size: int,
	inset: int = 0,
	stroke_width: int = 0,
	stroke_color: str | None = None,
) -> PIL.Image.Image:
	"""
	Cover-fit an image into a square and clip it to a circle.

	Args:
		image: Source image.
		target_size: Output edge in pixels.
		inset: Pixels kept free around the circle for the stroke.
		stroke_width: Stroke width in pixels, 0 for none.
		stroke_color: Stroke color when stroking.

	Returns:
		RGBA image of target_size x target_size with transparent corners.
	"""
	target_size = max(1, int(target_size))
	inset = max(0, min(int(inset), (target_size - 1) // 2))
	source = image.convert("RGBA")
	cover_width, cover_height = compute_cover_size(
		source.width,
		source.height,
		target_size,
		target_size,
	)
	scaled = source.resize((cover_width, cover_height), PIL.Image.Resampling.LANCZOS)
	offset_x = (cover_width - target_size) // 2
	offset_y = (cover_height - target_size) // 2
	fitted = scaled.crop((offset_x, offset_y, offset_x + target_size, offset_y + target_size))

	mask = build_circle_mask(target_size, inset)
	alpha = PIL.Image.new("L", (target_size, target_size), 0)
	alpha.paste(fitted.getchannel("A"), (0, 0), mask)
	result = fitted.copy()
	result.putalpha(alpha)

	if stroke_width > 0 and stroke_color:
		draw = PIL.ImageDraw.Draw(result)
		draw.ellipse(
			(inset, inset, target_size - 1 - inset, target_size - 1 - inset),
			outline=stroke_color,
			width=int(stroke_width),
		)
	return result
