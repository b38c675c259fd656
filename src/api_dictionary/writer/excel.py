"""Excel workbook export: one sheet per collection."""

from pathlib import Path

import pandas as pd

from api_dictionary.models import DataDictionary, EndpointSummary, FieldRecord, SchemaSummary

SHEETS = (
    ("Field Instances", "field_instances", FieldRecord),
    ("Endpoints", "endpoints", EndpointSummary),
    ("Schemas", "schemas", SchemaSummary),
)


def _frame(rows: list, model) -> pd.DataFrame:
    # column headers even when a collection is empty
    columns = [field.alias or name for name, field in model.model_fields.items()]
    return pd.DataFrame([row.to_row() for row in rows], columns=columns)


def write_excel(dictionary: DataDictionary, output: Path) -> Path:
    output.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        for sheet_name, attribute, model in SHEETS:
            _frame(getattr(dictionary, attribute), model).to_excel(writer, sheet_name=sheet_name, index=False)
    return output
