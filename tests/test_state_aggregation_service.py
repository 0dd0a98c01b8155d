"""
tests/test_state_aggregation_service.py

Pytest unit tests for the per-state merge of customers and product rankings.
"""

from __future__ import annotations

from app.services.state_aggregation_service import MAX_PRODUCTS_PER_STATE, StateAggregationService


def _build(sample_rows, **kwargs):
    service = StateAggregationService(**kwargs)
    return service.build(
        sample_rows["customers_by_state"],
        sample_rows["top_product_per_state"],
        sample_rows["top_products_by_state"],
    )


class TestStateAggregation:
    def test_one_record_per_base_state_sorted_by_revenue(self, sample_rows) -> None:
        states = _build(sample_rows)

        assert [state.state for state in states] == ["MG", "SP", "RJ"]
        assert [state.total_revenue for state in states] == [9000.0, 5000.0, 2500.0]

    def test_state_codes_are_upper_cased(self, sample_rows) -> None:
        states = {state.state: state for state in _build(sample_rows)}

        assert "SP" in states
        assert states["SP"].total_customers == 1500
        assert states["SP"].total_sellers == 12

    def test_enrichment_never_creates_states(self, sample_rows) -> None:
        codes = [state.state for state in _build(sample_rows)]

        assert "AM" not in codes

    def test_top_product_attached_by_code(self, sample_rows) -> None:
        states = {state.state: state for state in _build(sample_rows)}

        top = states["SP"].top_product
        assert top is not None
        assert top.id == "b"
        assert top.display_name == "Widget"
        assert top.revenue == 250.0
        assert states["RJ"].top_product is None
        assert states["MG"].top_product is None

    def test_product_lists_ranked_descending(self, sample_rows) -> None:
        states = {state.state: state for state in _build(sample_rows)}

        assert [product.id for product in states["SP"].all_products] == ["b", "a"]
        assert [product.id for product in states["RJ"].all_products] == ["c"]
        assert states["MG"].all_products == []

    def test_product_list_is_bounded(self) -> None:
        products = [
            {"state": "SP", "product_id": f"p{i}", "total_revenue": i, "units_sold": 1}
            for i in range(40)
        ]

        states = StateAggregationService().build([{"state": "SP", "customers": 1}], (), products)

        listed = states[0].all_products
        assert len(listed) == MAX_PRODUCTS_PER_STATE
        assert listed[0].id == "p39"
        assert [product.revenue for product in listed] == sorted(
            (product.revenue for product in listed), reverse=True
        )

    def test_equal_revenue_keeps_input_order(self) -> None:
        products = [
            {"state": "SP", "product_id": f"tie{i}", "total_revenue": 10, "units_sold": 1}
            for i in range(20)
        ]
        products.insert(5, {"state": "SP", "product_id": "top", "total_revenue": 99})

        states = StateAggregationService().build([{"state": "SP", "customers": 1}], (), products)

        listed = [product.id for product in states[0].all_products]
        assert listed == ["top"] + [f"tie{i}" for i in range(14)]

    def test_custom_bound(self, sample_rows) -> None:
        states = {state.state: state for state in _build(sample_rows, max_products_per_state=1)}

        assert [product.id for product in states["SP"].all_products] == ["b"]

    def test_repeated_base_state_last_row_wins(self) -> None:
        states = StateAggregationService().build(
            [
                {"state": "SP", "customers": 1, "revenue": 10},
                {"state": "sp", "customers": 2, "revenue": 20},
            ]
        )

        assert len(states) == 1
        assert states[0].total_customers == 2
        assert states[0].total_revenue == 20.0

    def test_rows_without_code_are_skipped(self) -> None:
        states = StateAggregationService().build(
            [{"customers": 5, "revenue": 50}, {"state": "  ", "customers": 1}, "junk"]
        )

        assert states == []

    def test_empty_inputs(self) -> None:
        assert StateAggregationService().build([], [], []) == []
