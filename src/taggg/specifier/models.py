from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, StrictInt, StrictStr

from ..store.models import ResourceIntent


class ById(BaseModel):
    """Resource named by surrogate id"""
    kind: Literal["id"] = "id"
    id: StrictInt
    
    def intent(self) -> ResourceIntent:
        return ResourceIntent(id=self.id)


class ByFields(BaseModel):
    """Resource described by explicit attributes (never by id)"""
    kind: Literal["fields"] = "fields"
    uri: Optional[str] = None
    class_: Optional[Union[StrictInt, StrictStr]] = Field(None, alias="class")
    value: Optional[str] = None
    content: Optional[str] = None
    
    model_config = {"populate_by_name": True}
    
    def intent(self) -> ResourceIntent:
        return ResourceIntent(
            uri=self.uri, class_=self.class_, value=self.value, content=self.content
        )


class ByUri(BaseModel):
    """Resource named by URI ("uri:<uri>")"""
    kind: Literal["uri"] = "uri"
    uri: str
    
    def intent(self) -> ResourceIntent:
        return ResourceIntent(uri=self.uri)


class ByClassValue(BaseModel):
    """Resource named by "[<class>:]<value>" with the class given by name"""
    kind: Literal["class_value"] = "class_value"
    class_: Optional[str] = Field(None, alias="class")
    value: str
    
    model_config = {"populate_by_name": True}
    
    def intent(self) -> ResourceIntent:
        return ResourceIntent(class_=self.class_, value=self.value)


Specifier = Union[ById, ByFields, ByUri, ByClassValue]
