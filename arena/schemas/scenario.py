"""Pydantic schemas for the scenario catalogue."""
from pydantic import BaseModel


class DimensionSchema(BaseModel):
    id: int
    title: str
    description: str = ""

    class Config:
        from_attributes = True


class CultureValueSchema(BaseModel):
    id: str
    name: str
    description: str = ""

    class Config:
        from_attributes = True


class ScenarioSummarySchema(BaseModel):
    id: str
    title: str
    description: str
    difficulty: str
    estimated_minutes: int
    primary_dimension: DimensionSchema
    secondary_dimension: DimensionSchema | None = None
    culture_value: CultureValueSchema

    class Config:
        from_attributes = True


class ScenarioDetailSchema(ScenarioSummarySchema):
    node_count: int
    behavior_tags: list[str]
