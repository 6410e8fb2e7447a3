import datetime
import json
import pathlib

import pypdf
import pytest

import catalog_builders
import product_catalog_pdf as pcp
import product_catalog_pdf.cli
import product_catalog_pdf.config
import product_catalog_pdf.generator
import product_catalog_pdf.target


GENERATED_AT = datetime.datetime(2024, 5, 1, 9, 0)


#============================================
def _recording_target() -> pcp.target.RecordingRenderTarget:
	page = pcp.config.PageSpec()
	return pcp.target.RecordingRenderTarget(page.width_mm, page.height_mm)


#============================================
def test_output_names() -> None:
	assert pcp.generator.build_output_name("catalogo-produtos", GENERATED_AT) == "catalogo-produtos-2024-05-01.pdf"


#============================================
def test_empty_products_return_none(capsys) -> None:
	assert pcp.generator.generate_catalog([]) is None
	assert "No products" in capsys.readouterr().out


#============================================
def test_catalog_on_recording_target() -> None:
	"""
	The cover takes page one and cards start on page two.
	"""
	target = _recording_target()
	products = catalog_builders.make_products("Cozinha", 10)
	result = pcp.generator.generate_catalog(products, target=target, generated_at=GENERATED_AT)
	assert target.finished
	assert result.output_path is None
	assert result.pages == 3
	assert {card.page_index for card in result.report.cards} == {1, 2}
	cover_texts = [op.values["text"] for op in target.ops if op.kind == "text" and op.page_index == 0]
	assert "Gerado em: 01/05/2024" in cover_texts


#============================================
def test_cover_can_be_disabled() -> None:
	target = _recording_target()
	settings = pcp.config.CatalogSettings(cover=pcp.config.CoverSpec(enabled=False))
	products = catalog_builders.make_products("Cozinha", 3)
	result = pcp.generator.generate_catalog(products, settings, target=target, generated_at=GENERATED_AT)
	assert result.pages == 1
	assert result.report.cards[0].page_index == 0


#============================================
def test_catalog_pdf_written(tmp_path: pathlib.Path) -> None:
	products = catalog_builders.make_products("Cozinha", 10) + catalog_builders.make_products("Banho", 3)
	result = pcp.generator.generate_catalog(products, output_dir=tmp_path, generated_at=GENERATED_AT)
	assert result.output_path == tmp_path / "catalogo-produtos-2024-05-01.pdf"
	reader = pypdf.PdfReader(str(result.output_path))
	assert len(reader.pages) == result.pages


#============================================
def test_multi_template_requires_registry() -> None:
	products = catalog_builders.make_products("Cozinha", 1)
	with pytest.raises(ValueError):
		pcp.generator.generate_catalog_with_templates(products, None, {"Cozinha": "t1"}, {})


#============================================
def test_multi_template_pdf(tmp_path: pathlib.Path) -> None:
	layout = pcp.config.LayoutTemplate(
		elements=(
			pcp.config.ElementSpec(
				id="product-name-1",
				binding=pcp.config.ContentBinding.NAME,
				ref_x=10.0,
				ref_y=10.0,
				ref_w=280.0,
				ref_h=40.0,
			),
		),
	)
	registry = {"t1": pcp.config.NamedTemplate(template_id="t1", name="Nome", layout=layout)}
	products = catalog_builders.make_products("Cozinha", 2) + catalog_builders.make_products("Mesa", 2)
	result = pcp.generator.generate_catalog_with_templates(
		products,
		None,
		{"Cozinha": "t1"},
		registry,
		output_dir=tmp_path,
		generated_at=GENERATED_AT,
	)
	assert result.output_path.name == "catalogo-multiplos-templates-2024-05-01.pdf"
	assert result.output_path.exists()
	assert result.report.skipped_categories == ["Mesa"]
	assert len(result.warnings) == 1


#============================================
def test_preview_requires_template() -> None:
	products = catalog_builders.make_products("Cozinha", 1)
	assert pcp.generator.generate_preview(products, None, None) is None
	assert pcp.generator.generate_preview(products, None, pcp.config.LayoutTemplate()) is None


#============================================
def test_preview_card_placement() -> None:
	layout = pcp.config.LayoutTemplate(
		elements=(pcp.config.ElementSpec(id="price", binding=pcp.config.ContentBinding.PRICE, ref_w=100.0, ref_h=30.0),),
	)
	target = _recording_target()
	products = catalog_builders.make_products("Cozinha", 3)
	result = pcp.generator.generate_preview(products, None, layout, target=target, generated_at=GENERATED_AT)
	assert result.pages == 1
	card = result.report.cards[0]
	assert card.product_id == products[0].product_id
	assert (card.width, card.height) == (pytest.approx(170.0), pytest.approx(150.0))
	assert (card.x, card.y) == (pytest.approx(20.0), pytest.approx(40.0))
	assert catalog_builders.drawn_texts(target) == ["R$ 10,00"]


#============================================
def test_manifest(tmp_path: pathlib.Path) -> None:
	target = _recording_target()
	products = catalog_builders.make_products("Cozinha", 4)
	settings = pcp.config.CatalogSettings()
	result = pcp.generator.generate_catalog(products, settings, target=target, generated_at=GENERATED_AT)
	manifest_path = tmp_path / "out" / "manifest.json"
	pcp.generator.write_manifest(manifest_path, result, settings)
	data = json.loads(manifest_path.read_text(encoding="utf-8"))
	assert data["pages"] == result.pages
	assert data["cards_placed"] == 4
	assert data["layout"]["capacity"] == 8
	assert len(data["cards"]) == 4
	assert data["generated_at"] == GENERATED_AT.isoformat()


#============================================
def test_cli_pipeline(tmp_path: pathlib.Path) -> None:
	"""
	Products and store files in, dated PDF and manifest out.
	"""
	products_path = tmp_path / "products.json"
	rows = [
		{"id": 1, "name": "Caneca", "internal_code": "CAN", "price": 19.9, "categories": {"name": "Cozinha"}},
		{"id": 2, "name": "Toalha", "internal_code": "TOA", "price": 39.9, "stock": 3, "categories": None},
	]
	products_path.write_text(json.dumps({"products": rows}), encoding="utf-8")
	config_path = tmp_path / "store.json"
	config_path.write_text(
		json.dumps({pcp.config.KEY_CATALOG_CONFIGURATION: {"layout": {"rows": 3, "columns": 2}}}),
		encoding="utf-8",
	)
	manifest_path = tmp_path / "manifest.json"
	output_dir = tmp_path / "pdf"
	args = pcp.cli.parse_args(
		[
			str(products_path),
			"-c",
			str(config_path),
			"-o",
			str(output_dir),
			"-m",
			str(manifest_path),
			"-v",
			"public",
			"-q",
		]
	)
	result = pcp.cli.run_pipeline(args)
	assert result is not None
	assert result.output_path.parent == output_dir
	assert result.output_path.exists()
	assert manifest_path.exists()
	assert len(result.report.cards) == 2
