"""Built-in bilingual text model."""

from docmodel.models.base import ModelBase


class I18NText(ModelBase):
    """Text held in English and French; both translations are optional."""

    constraints = {
        "english": {"type": "string"},
        "french": {"type": "string"},
    }
