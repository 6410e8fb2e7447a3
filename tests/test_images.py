import asyncio
import pathlib

import httpx
import PIL.Image
import pytest

import catalog_builders
import product_catalog_pdf as pcp
import product_catalog_pdf.images


#============================================
def test_cover_size_never_letterboxes() -> None:
	assert pcp.images.compute_cover_size(100, 50, 40, 40) == (80, 40)
	assert pcp.images.compute_cover_size(30, 90, 60, 60) == (60, 180)
	width, height = pcp.images.compute_cover_size(1, 1, 17, 23)
	assert width >= 17 and height >= 23


#============================================
def test_crop_circular_clips_corners() -> None:
	"""
	Corners are transparent and the center keeps the photo.
	"""
	source = PIL.Image.new("RGB", (50, 30), "red")
	cropped = pcp.images.crop_circular(source, 40, inset=2)
	assert cropped.size == (40, 40)
	assert cropped.mode == "RGBA"
	assert cropped.getpixel((0, 0))[3] == 0
	assert cropped.getpixel((39, 39))[3] == 0
	center = cropped.getpixel((20, 20))
	assert center[3] == 255
	assert center[:3] == (255, 0, 0)


#============================================
def test_crop_circular_stroke() -> None:
	source = PIL.Image.new("RGB", (40, 40), "white")
	cropped = pcp.images.crop_circular(source, 40, inset=0, stroke_width=3, stroke_color="#000000")
	edge = cropped.getpixel((20, 1))
	assert edge[:3] == (0, 0, 0)
	assert cropped.getpixel((20, 20))[:3] == (255, 255, 255)


#============================================
def test_load_data_url() -> None:
	loader = pcp.images.ImageLoader()
	image = asyncio.run(loader.load(catalog_builders.make_data_url((12, 8))))
	assert image.size == (12, 8)


#============================================
def test_load_local_file(tmp_path: pathlib.Path) -> None:
	path = tmp_path / "photo.png"
	path.write_bytes(catalog_builders.make_png_bytes((5, 7)))
	loader = pcp.images.ImageLoader()
	image = asyncio.run(loader.load(str(path)))
	assert image.size == (5, 7)


#============================================
def test_load_failures_raise_and_are_cached(tmp_path: pathlib.Path) -> None:
	"""
	Missing files and bad payloads raise ImageLoadError, once per source.
	"""
	loader = pcp.images.ImageLoader()
	missing = str(tmp_path / "missing.png")
	with pytest.raises(pcp.images.ImageLoadError):
		asyncio.run(loader.load(missing))
	with pytest.raises(pcp.images.ImageLoadError):
		asyncio.run(loader.load(missing))

	garbage = tmp_path / "garbage.png"
	garbage.write_bytes(b"not an image")
	with pytest.raises(pcp.images.ImageLoadError):
		asyncio.run(loader.load(str(garbage)))

	with pytest.raises(pcp.images.ImageLoadError):
		asyncio.run(loader.load("data:image/png;base64,@@@"))


#============================================
def test_http_fetch_with_mock_transport() -> None:
	"""
	HTTP sources go through httpx; error statuses become ImageLoadError.
	"""
	png = catalog_builders.make_png_bytes((9, 9))

	def handler(request: httpx.Request) -> httpx.Response:
		if request.url.path == "/ok.png":
			return httpx.Response(200, content=png)
		return httpx.Response(404)

	async def scenario() -> tuple[PIL.Image.Image, bool]:
		client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
		loader = pcp.images.ImageLoader(client=client)
		image = await loader.load("https://photos.example/ok.png")
		failed = False
		try:
			await loader.load("https://photos.example/gone.png")
		except pcp.images.ImageLoadError:
			failed = True
		await loader.aclose()
		await client.aclose()
		return image, failed

	image, failed = asyncio.run(scenario())
	assert image.size == (9, 9)
	assert failed
