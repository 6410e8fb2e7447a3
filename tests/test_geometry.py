import pytest

import product_catalog_pdf as pcp
import product_catalog_pdf.config
import product_catalog_pdf.geometry


#============================================
def test_capacity_is_rows_times_columns() -> None:
	"""
	Grid capacity is rows * columns for every grid.
	"""
	for rows in range(1, 7):
		for columns in range(1, 5):
			grid = pcp.config.GridSpec(rows=rows, columns=columns)
			assert grid.capacity == rows * columns


#============================================
def test_default_a4_geometry() -> None:
	"""
	Default A4 portrait with a 4x2 grid and the title reserve.
	"""
	page = pcp.config.PageSpec()
	grid = pcp.config.GridSpec()
	geometry = pcp.geometry.compute_layout_geometry(page, grid, title_reserve=25.0)
	assert geometry.page_w == 210.0
	assert geometry.page_h == 297.0
	assert geometry.content_w == pytest.approx(180.0)
	assert geometry.content_h == pytest.approx(232.0)
	assert geometry.card_w == pytest.approx(87.5)
	assert geometry.card_h == pytest.approx(50.5)


#============================================
def test_card_height_cap_applies() -> None:
	"""
	A single row would be taller than the cap, so the cap wins.
	"""
	page = pcp.config.PageSpec()
	grid = pcp.config.GridSpec(rows=1, columns=2)
	geometry = pcp.geometry.compute_layout_geometry(page, grid)
	assert geometry.card_h == pytest.approx(80.0)

	uncapped = pcp.config.GridSpec(rows=1, columns=2, max_card_height=None)
	geometry = pcp.geometry.compute_layout_geometry(page, uncapped)
	assert geometry.card_h == pytest.approx(257.0)


#============================================
def test_degenerate_geometry_clamps() -> None:
	"""
	Margins larger than the page clamp every dimension to the minimum.
	"""
	page = pcp.config.PageSpec(margin_left=150.0, margin_right=150.0, margin_top=200.0, margin_bottom=200.0)
	grid = pcp.config.GridSpec(rows=0, columns=-2, card_spacing=50.0)
	geometry = pcp.geometry.compute_layout_geometry(page, grid)
	minimum = pcp.config.MIN_DIMENSION
	assert geometry.content_w == minimum
	assert geometry.content_h == minimum
	assert geometry.card_w == minimum
	assert geometry.card_h == minimum


#============================================
def test_resolve_page_size() -> None:
	"""
	Paper names, orientation, and custom sizes.
	"""
	assert pcp.geometry.resolve_page_size("A4", "portrait") == (210.0, 297.0)
	assert pcp.geometry.resolve_page_size("A4", "landscape") == (297.0, 210.0)
	assert pcp.geometry.resolve_page_size("Letter", "portrait") == (216.0, 279.0)
	assert pcp.geometry.resolve_page_size("a5", "portrait") == (148.0, 210.0)
	assert pcp.geometry.resolve_page_size("Tabloid", "portrait") == (210.0, 297.0)
	assert pcp.geometry.resolve_page_size("Custom", "portrait", 100.0, 150.0) == (100.0, 150.0)
	assert pcp.geometry.resolve_page_size("Custom", "landscape", 100.0, 150.0) == (150.0, 100.0)


#============================================
def test_coordinate_mapping_uniform_scale() -> None:
	"""
	Reference 300x200 onto a 150x100 card scales by one half.
	"""
	element = pcp.config.ElementSpec(id="label-1", ref_x=60.0, ref_y=40.0, ref_w=40.0, ref_h=20.0)
	abs_x, abs_y, abs_w, abs_h = pcp.geometry.map_element_rect(element, 12.0, 34.0, 150.0, 100.0, 300.0, 200.0)
	assert abs_x == pytest.approx(12.0 + 30.0)
	assert abs_y == pytest.approx(34.0 + 20.0)
	assert abs_w == pytest.approx(20.0)
	assert abs_h == pytest.approx(10.0)


#============================================
def test_coordinate_mapping_independent_axes() -> None:
	"""
	Different aspect ratios stretch each axis on its own.
	"""
	element = pcp.config.ElementSpec(id="label-1", ref_x=30.0, ref_y=50.0, ref_w=60.0, ref_h=100.0)
	abs_x, abs_y, abs_w, abs_h = pcp.geometry.map_element_rect(element, 0.0, 0.0, 300.0, 50.0, 300.0, 200.0)
	assert (abs_x, abs_w) == pytest.approx((30.0, 60.0))
	assert (abs_y, abs_h) == pytest.approx((12.5, 25.0))


#============================================
def test_cell_origin() -> None:
	page = pcp.config.PageSpec()
	grid = pcp.config.GridSpec()
	geometry = pcp.geometry.compute_layout_geometry(page, grid, title_reserve=25.0)
	assert pcp.geometry.compute_cell_origin(page, grid, geometry, 45.0, 0) == (0, 0, 15.0, 45.0)
	row, col, x, y = pcp.geometry.compute_cell_origin(page, grid, geometry, 45.0, 5)
	assert (row, col) == (2, 1)
	assert x == pytest.approx(15.0 + 87.5 + 5.0)
	assert y == pytest.approx(45.0 + 2 * (50.5 + 10.0))


#============================================
def test_align_offset() -> None:
	assert pcp.geometry.compute_align_offset(100.0, 40.0, "left") == 0.0
	assert pcp.geometry.compute_align_offset(100.0, 40.0, "center") == pytest.approx(30.0)
	assert pcp.geometry.compute_align_offset(100.0, 40.0, "right") == pytest.approx(60.0)
	assert pcp.geometry.compute_align_offset(10.0, 40.0, "right") == 0.0
