from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class SpanModel(BaseModel):
    type: str
    text: str
    url: Optional[str] = None


class TableCellModel(BaseModel):
    text: str
    spans: List[SpanModel] = Field(default_factory=list)


class BlockModel(BaseModel):
    type: str
    text: Optional[str] = None
    spans: List[SpanModel] = Field(default_factory=list)
    level: Optional[int] = None
    indent: Optional[int] = None
    ordinal: Optional[int] = None
    is_header: Optional[bool] = None
    cells: List[TableCellModel] = Field(default_factory=list)
    language: Optional[str] = None
    code: Optional[str] = None
    lines: List[str] = Field(default_factory=list)


class RenderResponse(BaseModel):
    success: bool
    format: str
    blocks: List[BlockModel] = Field(default_factory=list)
    html: Optional[str] = None
    text: Optional[str] = None


class NormalizeResponse(BaseModel):
    success: bool
    mode: str
    text: str


class ManifestEntry(BaseModel):
    main: bool = False
    parts: List[int] = Field(default_factory=list)


class ManifestResponse(BaseModel):
    success: bool
    generated_at: str
    total_with_solutions: int
    solutions: Dict[str, ManifestEntry] = Field(default_factory=dict)


class CodeListing(BaseModel):
    language: str
    code: str


class TableModel(BaseModel):
    header: List[str]
    rows: List[List[str]] = Field(default_factory=list)


class ApproachModel(BaseModel):
    name: str
    time_complexity: Optional[str] = None
    space_complexity: Optional[str] = None
    description: List[BlockModel] = Field(default_factory=list)
    pseudocode: str = ""


class SolutionResponse(BaseModel):
    success: bool
    problem_id: str
    part: str
    title: Optional[str] = None
    difficulty: Optional[str] = None
    category: Optional[str] = None
    code: Dict[str, CodeListing] = Field(default_factory=dict)
    sections: Dict[str, List[BlockModel]] = Field(default_factory=dict)
    diagrams: Dict[str, str] = Field(default_factory=dict)
    tables: Dict[str, TableModel] = Field(default_factory=dict)
    approaches: List[ApproachModel] = Field(default_factory=list)


class StatsResponse(BaseModel):
    success: bool
    stats: Dict[str, Any] = Field(default_factory=dict)
