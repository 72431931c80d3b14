# tests/test_filters.py
import uuid
from datetime import datetime, timezone

from charlotte.core.filters import (
    CatalogFilter,
    available_colors,
    available_tags,
    filter_by_colors,
    filter_orders,
    filter_patterns,
    remote_query,
    toggle_value,
)
from charlotte.models.order import Order
from charlotte.models.pattern import Pattern
from charlotte.models.user import UserSummary


def pattern(nome, codigo="EST-000", descricao=None, tags=(), cores=None):
    return Pattern(
        id=uuid.uuid4(),
        nome=nome,
        codigo=codigo,
        descricao=descricao,
        tags=list(tags),
        paleta_cores=cores or {},
    )


def catalog():
    return [
        pattern("Floral Azul", "EST-001", "Rosas em fundo azul", ["floral", "verao"], {"Azul": "#0000ff"}),
        pattern("Geométrico", "EST-002", None, ["geometrico"], {"Preto": "#000000", "Branco": "#ffffff"}),
        pattern("Listras", "FLO-003", "listras finas", ["classico"], {"Azul": "#0000ff"}),
        pattern("Xadrez", "EST-004", "Xadrez vermelho", [], {}),
    ]


def test_empty_filter_keeps_everything_in_order():
    items = catalog()
    assert CatalogFilter().is_empty
    assert filter_patterns(items, CatalogFilter()) == items


def test_result_is_ordered_subset():
    items = catalog()
    result = filter_patterns(items, CatalogFilter(text="e"))
    assert all(p in items for p in result)
    positions = [items.index(p) for p in result]
    assert positions == sorted(positions)


def test_text_matches_name_code_or_description_case_insensitive():
    items = catalog()
    result = filter_patterns(items, CatalogFilter(text="  flo "))
    assert [p.nome for p in result] == ["Floral Azul", "Listras"]

    result = filter_patterns(items, CatalogFilter(text="VERMELHO"))
    assert [p.nome for p in result] == ["Xadrez"]


def test_missing_description_never_matches_text():
    items = [pattern("Liso", "EST-9", None)]
    assert filter_patterns(items, CatalogFilter(text="fundo")) == []


def test_tags_and_colors_use_any_semantics():
    items = catalog()
    result = filter_patterns(items, CatalogFilter(tags=["floral", "geometrico"]))
    assert [p.nome for p in result] == ["Floral Azul", "Geométrico"]

    result = filter_patterns(items, CatalogFilter(colors=["#0000ff", "#ffffff"]))
    assert [p.nome for p in result] == ["Floral Azul", "Geométrico", "Listras"]


def test_components_combine_with_and():
    items = catalog()
    result = filter_patterns(items, CatalogFilter(text="azul", colors=["#0000ff"]))
    assert [p.nome for p in result] == ["Floral Azul"]

    assert filter_patterns(items, CatalogFilter(tags=["floral"], colors=["#000000"])) == []


def test_floral_scenario():
    a = pattern("A", tags=["floral", "verao"])
    b = pattern("B", tags=["geometrico"])
    c = pattern("C", tags=[])
    assert filter_patterns([a, b, c], CatalogFilter(tags=["floral"])) == [a]


def test_text_floral_scenario():
    tropical = pattern("Floral Tropical")
    listras = pattern("Listras")
    assert filter_patterns([tropical, listras], CatalogFilter(text="floral")) == [tropical]


def test_color_only_stage_of_hybrid_mode():
    items = catalog()
    assert filter_by_colors(items, []) == items
    assert [p.nome for p in filter_by_colors(items, ["#000000"])] == ["Geométrico"]


def test_remote_query_carries_text_and_tags_only():
    query = remote_query("estampas", CatalogFilter(text="flor", tags=["a", "b"], colors=["#fff"]))
    assert query.table == "estampas"
    assert query.search == "flor"
    assert query.search_columns == ("nome", "codigo", "descricao")
    assert query.overlaps == {"tags": ["a", "b"]}

    empty = remote_query("estampas", CatalogFilter())
    assert empty.search is None
    assert empty.overlaps == {}


def test_facets_are_sorted_and_unique():
    items = catalog()
    assert available_tags(items) == ["classico", "floral", "geometrico", "verao"]
    assert available_colors(items) == ["#000000", "#0000ff", "#ffffff"]


def test_toggle_value():
    assert toggle_value([], "floral") == ["floral"]
    assert toggle_value(["floral", "verao"], "floral") == ["verao"]


def order(nome, status):
    return Order(
        id=uuid.uuid4(),
        usuario_id=uuid.uuid4(),
        data_pedido=datetime.now(timezone.utc),
        status=status,
        valor_total=10,
        usuario=UserSummary(nome_completo=nome),
    )


def test_filter_orders_by_customer_id_and_status():
    ana = order("Ana Souza", "processando")
    bruno = order("Bruno Lima", "concluido")
    orders = [ana, bruno]

    assert filter_orders(orders) == orders
    assert filter_orders(orders, text="souza") == [ana]
    assert filter_orders(orders, text=str(bruno.id)[:8]) == [bruno]
    assert filter_orders(orders, status="concluido") == [bruno]
    assert filter_orders(orders, text="ana", status="cancelado") == []
