"""
Data models for exported analysis reports
The field aliases are the stable names of the downloadable JSON document
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ColumnStatistics(BaseModel):
    """Descriptive statistics of one numeric column"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    count: int = Field(description="Number of valid numeric values")
    mean: float = Field(description="Arithmetic mean")
    median: float = Field(description="Median value")
    std_dev: float = Field(alias="stdDev", description="Population standard deviation")
    min: float = Field(description="Minimum value")
    max: float = Field(description="Maximum value")


class ReportSummary(BaseModel):
    """Headline counts of a report"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total_records: int = Field(alias="totalRecords", description="Number of records")
    total_columns: int = Field(alias="totalColumns", description="Number of columns")
    numeric_fields: int = Field(alias="numericFields", description="Number of numeric columns")
    data_quality: int = Field(alias="dataQuality", description="Percentage of filled cells (0-100)")


class AnalysisReport(BaseModel):
    """Immutable summary document of one analyzed table"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: str = Field(description="ISO 8601 creation time")
    summary: ReportSummary = Field(description="Headline counts")
    columns: List[str] = Field(description="All column names in table order")
    numeric_columns: List[str] = Field(alias="numericColumns", description="Numeric columns")
    categorical_columns: List[str] = Field(alias="categoricalColumns", description="Categorical columns")
    other_columns: List[str] = Field(
        default_factory=list, alias="otherColumns", description="Unclassified columns"
    )
    statistics: Dict[str, ColumnStatistics] = Field(
        default_factory=dict, description="Statistics per numeric column with valid values"
    )
    sample_data: Optional[List[Dict[str, Any]]] = Field(
        default=None, alias="sampleData", description="First rows of the table"
    )

    def to_dict(self) -> Dict[str, Any]:
        exclude = {"sample_data"} if self.sample_data is None else None
        return self.model_dump(by_alias=True, exclude=exclude)

    def to_json(self, indent: Optional[int] = 2) -> str:
        exclude = {"sample_data"} if self.sample_data is None else None
        return self.model_dump_json(by_alias=True, exclude=exclude, indent=indent)
