from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field


# Reserved resource ids
RES_EMPTY = 0  # absent resource, the "no resource in this role" sentinel
RES_TAGGG = 1  # root resource, classed under itself
RES_CLASS = 2  # meta-class of every class resource

RESOURCE_FIELDS = ("id", "uri", "class", "value", "content")
RELATION_ROLES = ("subject", "predicate", "object", "creator")


class Resource(BaseModel):
    """A stored resource row"""
    id: int = Field(..., ge=0, description="Surrogate key")
    uri: Optional[str] = Field(None, description="Globally unique URI")
    class_: Optional[int] = Field(None, alias="class", description="Id of the class resource")
    value: Optional[str] = Field(None, description="Short value")
    content: Optional[str] = Field(None, description="Free-form text")
    
    model_config = {"populate_by_name": True, "frozen": True}
    
    def __str__(self) -> str:
        label = self.uri or self.value or ""
        return f"#{self.id} {label}".rstrip()


class ResourceIntent(BaseModel):
    """
    What a caller asked for: any combination of id, uri, class, value, content.
    
    Unset fields are None and take no part in lookups. `class_` holds either
    a class resource id or a class name still to be resolved.
    """
    id: Optional[int] = None
    uri: Optional[str] = None
    class_: Optional[Union[int, str]] = Field(None, alias="class")
    value: Optional[str] = None
    content: Optional[str] = None
    
    model_config = {"populate_by_name": True, "frozen": True}
    
    def is_empty(self) -> bool:
        """True when no field is set (the empty resource)"""
        return not self.set_fields()
    
    def has_attributes(self) -> bool:
        """True when any of uri/class/value/content is set"""
        return any(k != "id" for k in self.set_fields())
    
    def only_id(self) -> bool:
        return self.id is not None and not self.has_attributes()
    
    def set_fields(self) -> Dict[str, Any]:
        """Set fields keyed by column name ("class", not "class_")"""
        data = self.model_dump(by_alias=True)
        return {k: data[k] for k in RESOURCE_FIELDS if data[k] is not None}
    
    def with_class(self, class_id: int) -> "ResourceIntent":
        return self.model_copy(update={"class_": class_id})


class Relation(BaseModel):
    """A stored tag: four resource ids plus creation time"""
    subject: int = Field(RES_EMPTY, ge=0)
    predicate: int = Field(RES_EMPTY, ge=0)
    object: int = Field(RES_EMPTY, ge=0)
    creator: int = Field(RES_EMPTY, ge=0)
    created: Optional[datetime] = Field(None, description="Server-assigned timestamp")
    
    def key(self) -> tuple:
        return (self.subject, self.predicate, self.object, self.creator)


class LookupStatus(Enum):
    """Outcome of resolving a resource"""
    FOUND = "found"          # existing row matched
    NOT_FOUND = "not_found"  # nothing matched, nothing created
    CREATED = "created"      # new row inserted


class ResourceLookup(BaseModel):
    """Resolution result: a status and, unless NOT_FOUND, the resource"""
    status: LookupStatus
    resource: Optional[Resource] = None
    
    @classmethod
    def found(cls, resource: Resource) -> "ResourceLookup":
        return cls(status=LookupStatus.FOUND, resource=resource)
    
    @classmethod
    def created(cls, resource: Resource) -> "ResourceLookup":
        return cls(status=LookupStatus.CREATED, resource=resource)
    
    @classmethod
    def not_found(cls) -> "ResourceLookup":
        return cls(status=LookupStatus.NOT_FOUND)
    
    def __bool__(self) -> bool:
        return self.resource is not None
    
    @property
    def id(self) -> Optional[int]:
        return self.resource.id if self.resource else None


RESERVED_RESOURCES = {
    RES_EMPTY: Resource(id=RES_EMPTY, class_=RES_TAGGG, value="empty"),
    RES_TAGGG: Resource(id=RES_TAGGG, class_=RES_TAGGG, value="taggg"),
    RES_CLASS: Resource(id=RES_CLASS, class_=RES_TAGGG, value="class"),
}
