from sqlalchemy import func, inspect

from extensions import db


def primary_key_column(model):
    return inspect(model).primary_key[0]


def get_record(model, record_id):
    """Loads a record by id; ids that are not integers simply match nothing."""
    try:
        record_id = int(record_id)
    except (TypeError, ValueError):
        return None
    return db.session.get(model, record_id)


def is_duplicate(model, field, value, exclude_id=None):
    """
    Case-insensitive exact match of ``value`` against ``model.<field>``.

    ``exclude_id`` leaves one record out of the comparison so an update does
    not collide with the row being edited. This check only produces friendlier
    messages; the unique index on the column is what actually prevents
    duplicates under concurrent writes.
    """
    column = getattr(model, field)
    query = model.query.filter(func.lower(column) == func.lower(value))
    if exclude_id is not None:
        query = query.filter(primary_key_column(model) != exclude_id)
    return db.session.query(query.exists()).scalar()


def delete_record(model, record_id):
    record = get_record(model, record_id)
    if record is None:
        return False
    db.session.delete(record)
    db.session.commit()
    return True
