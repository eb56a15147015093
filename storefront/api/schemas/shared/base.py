# storefront/api/schemas/shared/base.py

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class AppBaseModel(BaseModel):
    """
    ✅ CONFIGURAÇÃO GLOBAL

    - extra='ignore': documentos do backend trazem campos que o editor não usa
    - alias em camelCase: é o formato do backend e do frontend; os atributos
      em Python continuam em snake_case (populate_by_name)
    """
    model_config = ConfigDict(
        from_attributes=True,
        extra='ignore',
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @classmethod
    def resolve_field(cls, name: str):
        """Aceita o nome do atributo ou o alias camelCase."""
        if name in cls.model_fields:
            return name
        for field_name, info in cls.model_fields.items():
            if info.alias == name:
                return field_name
        return None
