import catalog_builders
import product_catalog_pdf as pcp
import product_catalog_pdf.config
import product_catalog_pdf.content


ContentBinding = pcp.config.ContentBinding
TextRun = pcp.content.TextRun
ViewerClass = pcp.config.ViewerClass


#============================================
def test_parse_markup_bold_segments() -> None:
	runs = pcp.content.parse_markup("**Cod.:** 123 e **mais**")
	assert runs == [
		TextRun("Cod.:", bold=True),
		TextRun(" 123 e ", bold=False),
		TextRun("mais", bold=True),
	]


#============================================
def test_parse_markup_unmatched_marker_is_literal() -> None:
	assert pcp.content.parse_markup("a **b") == [TextRun("a **b")]
	assert pcp.content.parse_markup("") == []
	assert pcp.content.runs_to_plain(pcp.content.parse_markup("x **y** z")) == "x y z"


#============================================
def test_binding_strips_timestamp_suffix() -> None:
	assert pcp.content.binding_for_element_id("price-1700000000") == ContentBinding.PRICE
	assert pcp.content.binding_for_element_id("product-name") == ContentBinding.NAME
	assert pcp.content.binding_for_element_id("product-name-1712345678") == ContentBinding.NAME
	assert pcp.content.binding_for_element_id("internal-code-9") == ContentBinding.INTERNAL_CODE
	assert pcp.content.binding_for_element_id("custom-text-5") == ContentBinding.LABEL


#============================================
def test_format_price() -> None:
	assert pcp.content.format_price(1234.56) == "R$ 1.234,56"
	assert pcp.content.format_price(0.0) == "R$ 0,00"
	assert pcp.content.format_price(9.9) == "R$ 9,90"
	assert pcp.content.format_price(1000000.0) == "R$ 1.000.000,00"


#============================================
def test_stock_is_gated_for_restricted_viewers() -> None:
	"""
	Stock never resolves for public, client, or external sellers.
	"""
	product = catalog_builders.make_product("1", "Caneca", "Cozinha", stock=5.0)
	element = pcp.config.ElementSpec(id="stock-1", binding=ContentBinding.STOCK)
	assert pcp.content.resolve_content(product, element, ViewerClass.ADMIN) == "**Estoque:** 5"
	assert pcp.content.resolve_content(product, element, ViewerClass.SELLER_INTERNAL) == "**Estoque:** 5"
	for viewer in (ViewerClass.PUBLIC, ViewerClass.CLIENT, ViewerClass.SELLER_EXTERNAL):
		assert pcp.content.resolve_content(product, element, viewer) == ""
		assert pcp.content.resolve_runs(product, element, viewer) == []


#============================================
def test_absent_fields_resolve_empty() -> None:
	product = catalog_builders.make_product("1", "Caneca")
	for binding in (ContentBinding.SIZE, ContentBinding.COLOR, ContentBinding.WIDTH, ContentBinding.OBSERVATIONS):
		element = pcp.config.ElementSpec(id=binding.value, binding=binding)
		assert pcp.content.resolve_content(product, element, ViewerClass.ADMIN) == ""


#============================================
def test_bound_values() -> None:
	product = catalog_builders.make_product("1", "Caneca", None, width=12.0, internal_code="X9")
	viewer = ViewerClass.ADMIN
	code = pcp.config.ElementSpec(id="internal-code", binding=ContentBinding.INTERNAL_CODE)
	width = pcp.config.ElementSpec(id="width", binding=ContentBinding.WIDTH)
	category = pcp.config.ElementSpec(id="category", binding=ContentBinding.CATEGORY)
	label = pcp.config.ElementSpec(id="custom-1", label="Oferta", binding=ContentBinding.LABEL)
	assert pcp.content.resolve_content(product, code, viewer) == "**Cod.:** X9"
	assert pcp.content.resolve_content(product, width, viewer) == "**Largura:** 12cm"
	assert pcp.content.resolve_content(product, category, viewer) == pcp.config.NO_CATEGORY_LABEL
	assert pcp.content.resolve_content(product, label, viewer) == "Oferta"


#============================================
def test_default_card_details_only_present_fields() -> None:
	bare = catalog_builders.make_product("1", "Caneca")
	assert pcp.content.default_card_details(bare, ViewerClass.ADMIN) == []

	full = catalog_builders.make_product(
		"2",
		"Toalha",
		"Banho",
		stock=3.0,
		stock_unit="Pc",
		width=50.0,
		length=70.0,
		observation="Algodão",
	)
	details = pcp.content.default_card_details(full, ViewerClass.ADMIN)
	assert details == [
		"Estoque: 3 Pc",
		"Categoria: Banho",
		"Dimensões: L:50 x C:70",
		"Obs: Algodão",
	]
	public_details = pcp.content.default_card_details(full, ViewerClass.PUBLIC)
	assert public_details[0] == "Categoria: Banho"
