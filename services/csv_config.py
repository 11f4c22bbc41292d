"""
Two-column (parameter, value) CSV import/export for simulation parameters.

Nested fields use dotted keys: `spouse.salary`, `oneTimeExpenses.0.year`.
"""
import io

import pandas as pd


def _flatten(data, prefix=''):
    for key, value in data.items():
        name = f'{prefix}{key}'
        if isinstance(value, dict):
            yield from _flatten(value, f'{name}.')
        elif isinstance(value, list):
            for i, item in enumerate(value):
                if isinstance(item, dict):
                    yield from _flatten(item, f'{name}.{i}.')
                else:
                    yield f'{name}.{i}', item
        elif value is not None:
            yield name, value


def _listify(node):
    if not isinstance(node, dict):
        return node
    node = {k: _listify(v) for k, v in node.items()}
    if node and all(k.isdigit() for k in node):
        return [node[k] for k in sorted(node, key=int)]
    return node


def _unflatten(flat):
    root = {}
    for dotted, value in flat.items():
        parts = dotted.split('.')
        node = root
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        node[parts[-1]] = value
    return _listify(root)


def params_to_csv(params: dict) -> str:
    """Serialize a (camelCase) params dict to CSV text."""
    records = [{'parameter': k, 'value': v} for k, v in _flatten(params)]
    df = pd.DataFrame(records, columns=['parameter', 'value'])
    return df.to_csv(index=False)


def csv_to_dict(content: bytes) -> dict:
    """
    Parse CSV content bytes into a nested params dict ready for validation.
    Values stay strings; the schema coerces them to each field's type.

    Raises:
        ValueError: if the CSV cannot be read or lacks the expected columns
    """
    try:
        df = pd.read_csv(io.BytesIO(content), dtype=str, keep_default_na=False)
    except Exception as e:
        raise ValueError(f"Failed to parse CSV: {e}") from e

    if not {'parameter', 'value'}.issubset(df.columns):
        raise ValueError("CSV must have 'parameter' and 'value' columns")

    flat = {}
    for key, value in zip(df['parameter'], df['value']):
        key = key.strip()
        if not key or value == '':
            continue
        flat[key] = value.strip()

    return _unflatten(flat)
