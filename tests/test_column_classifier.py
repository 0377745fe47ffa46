from upload_analytics.core.analysis.column_classifier import ColumnClassifier, ColumnType
from upload_analytics.core.ingestion.table import Table


def test_numeric_and_categorical_columns():
    table = Table.from_records([
        {"a": 1, "b": "x"},
        {"a": 2, "b": "y"},
        {"a": 3, "b": "x"},
    ])
    result = ColumnClassifier().classify(table)

    assert result.numeric == ["a"]
    assert result.categorical == ["b"]
    assert result.other == []


def test_many_distinct_text_values_are_unclassified():
    table = Table.from_records([{"name": f"item-{i}"} for i in range(25)])
    result = ColumnClassifier().classify(table)

    assert result.categorical == []
    assert result.other == ["name"]
    assert result.type_of("name") == ColumnType.UNCLASSIFIED


def test_single_stray_text_value_demotes_numeric_column():
    table = Table.from_records([
        {"score": "10"},
        {"score": "12"},
        {"score": "N/A"},
    ])
    result = ColumnClassifier().classify(table)

    assert result.numeric == []
    # Three distinct values: 10, 12 and "N/A"
    assert result.categorical == ["score"]


def test_empty_and_constant_text_columns_are_unclassified():
    table = Table.from_records([
        {"id": 1, "blank": "", "flag": "yes"},
        {"id": 2, "blank": None, "flag": "yes"},
    ])
    result = ColumnClassifier().classify(table)

    assert result.numeric == ["id"]
    assert result.other == ["blank", "flag"]


def test_empty_table_gives_empty_lists():
    result = ColumnClassifier().classify(Table(records=[], columns=[]))
    assert result.to_dict() == {"numeric": [], "categorical": [], "other": []}


def test_classification_preserves_order_and_is_repeatable(sales_table):
    classifier = ColumnClassifier()
    first = classifier.classify(sales_table)
    second = classifier.classify(sales_table)

    assert first == second
    assert first.numeric == ["sales", "units"]
    assert first.categorical == ["region", "note"]
    assert first.has_numeric
