"""docs.json schema, used to validate the artifact when it is loaded back."""

from pydantic import BaseModel, ConfigDict, Field


class _Schema(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class ParamSchema(_Schema):
    name: str
    type: str
    description: str


class ReturnSchema(_Schema):
    type: str
    description: str


class FunctionSchema(_Schema):
    name: str = Field(min_length=1)
    class_name: str = Field(alias="className")
    description: str
    params: list[ParamSchema]
    returns: list[ReturnSchema]
    anchor_id: str = Field(alias="anchorId", min_length=1)


class ClassSchema(_Schema):
    name: str = Field(min_length=1)
    functions: list[FunctionSchema]


class DocsSchema(_Schema):
    classes: list[ClassSchema]
    top_level_functions: list[FunctionSchema] = Field(alias="topLevelFunctions")
