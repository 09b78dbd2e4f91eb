from marshmallow import fields
from fntriggers.types.base import BaseSchema
from fntriggers.types.models import (
    OwnerReference,
    ObjectMeta,
    TriggerAttributes,
    TriggerFilter,
    TriggerReference,
    TriggerSubscriber,
    TriggerSpec,
    Trigger,
)


class OwnerReferenceSchema(BaseSchema):
    __model__ = OwnerReference

    api_version = fields.Str(data_key="apiVersion", allow_none=True, load_default=None)
    kind = fields.Str(data_key="kind", required=True)
    name = fields.Str(data_key="name", required=True)
    uid = fields.Str(data_key="uid", required=True)
    controller = fields.Bool(data_key="controller", allow_none=True, load_default=None)
    block_owner_deletion = fields.Bool(
        data_key="blockOwnerDeletion", allow_none=True, load_default=None
    )


class ObjectMetaSchema(BaseSchema):
    __model__ = ObjectMeta

    name = fields.Str(data_key="name", required=True)
    namespace = fields.Str(data_key="namespace", allow_none=True, load_default=None)
    labels = fields.Dict(
        keys=fields.Str(),
        values=fields.Str(),
        data_key="labels",
        allow_none=True,
        load_default=None,
    )
    annotations = fields.Dict(
        keys=fields.Str(),
        values=fields.Str(),
        data_key="annotations",
        allow_none=True,
        load_default=None,
    )
    owner_references = fields.List(
        fields.Nested(OwnerReferenceSchema()),
        data_key="ownerReferences",
        allow_none=True,
        load_default=None,
    )


class TriggerAttributesSchema(BaseSchema):
    __model__ = TriggerAttributes

    eventtypeversion = fields.Str(
        data_key="eventtypeversion", allow_none=True, load_default=None
    )
    source = fields.Str(data_key="source", allow_none=True, load_default=None)
    type = fields.Str(data_key="type", allow_none=True, load_default=None)


class TriggerFilterSchema(BaseSchema):
    __model__ = TriggerFilter

    attributes = fields.Nested(
        TriggerAttributesSchema(),
        data_key="attributes",
        allow_none=True,
        load_default=None,
    )


class TriggerReferenceSchema(BaseSchema):
    __model__ = TriggerReference

    kind = fields.Str(data_key="kind", allow_none=True, load_default=None)
    name = fields.Str(data_key="name", allow_none=True, load_default=None)
    namespace = fields.Str(data_key="namespace", allow_none=True, load_default=None)


class TriggerSubscriberSchema(BaseSchema):
    __model__ = TriggerSubscriber

    reference = fields.Nested(
        TriggerReferenceSchema(), data_key="ref", allow_none=True, load_default=None
    )


class TriggerSpecSchema(BaseSchema):
    __model__ = TriggerSpec

    broker = fields.Str(data_key="broker", allow_none=True, load_default=None)
    filter = fields.Nested(
        TriggerFilterSchema(), data_key="filter", allow_none=True, load_default=None
    )
    subscriber = fields.Nested(
        TriggerSubscriberSchema(),
        data_key="subscriber",
        allow_none=True,
        load_default=None,
    )


class TriggerSchema(BaseSchema):
    __model__ = Trigger

    metadata = fields.Nested(ObjectMetaSchema(), data_key="metadata", required=True)
    spec = fields.Nested(
        TriggerSpecSchema(), data_key="spec", allow_none=True, load_default=None
    )
