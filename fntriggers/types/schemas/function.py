from marshmallow import fields
from fntriggers.types.base import BaseSchema
from fntriggers.types.models import FunctionTriggerSpec, FunctionSpec


class FunctionTriggerSpecSchema(BaseSchema):
    __model__ = FunctionTriggerSpec

    event_type_version = fields.Str(data_key="eventTypeVersion", required=True)
    source = fields.Str(data_key="source", required=True)
    type = fields.Str(data_key="type", required=True)


class FunctionSpecSchema(BaseSchema):
    __model__ = FunctionSpec

    triggers = fields.List(
        fields.Nested(FunctionTriggerSpecSchema()),
        data_key="triggers",
        allow_none=True,
        load_default=None,
    )
