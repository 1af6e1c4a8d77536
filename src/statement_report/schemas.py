from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

PARTITION_COLUMNS = ["year", "month", "day"]
REQUIRED_COLUMNS = ["transaction_date", "bank", "no_or_code", "credit", "name"]


class RunContext(BaseModel):
    """Execution date of a run, split into the partition values stamped on every row."""

    model_config = ConfigDict(frozen=True)

    execution_date: date
    year: str = Field(..., min_length=4, max_length=4)
    month: str = Field(..., min_length=2, max_length=2)
    day: str = Field(..., min_length=2, max_length=2)

    @model_validator(mode="after")
    def check_parts_match_date(self) -> "RunContext":
        expected = self.execution_date.isoformat()
        if self.date_report != expected:
            raise ValueError(
                f"Partition values {self.date_report} do not match execution date {expected}"
            )
        return self

    @property
    def date_report(self) -> str:
        return f"{self.year}-{self.month}-{self.day}"

    def partition_values(self) -> dict:
        return {
            "year": self.year,
            "month": self.month,
            "day": self.day,
            "date_report": self.date_report,
        }


class TransactionSchema(BaseModel):
    """Schema describing one statement transaction in the datalake."""

    transaction_date: str = Field(..., description="Transaction date as dd/MM/yyyy")
    bank: str
    no_or_code: str = Field(..., description="Transaction number or code")
    credit: float
    name: Optional[str] = Field(None, description="Counterparty name; may be blank")


class _ReportRow(BaseModel):
    year: str
    month: str
    day: str
    date_report: str


class TotalAmountByDayRow(_ReportRow):
    transaction_day: Optional[int] = Field(None, ge=1, le=31)
    total_amount: Optional[float] = None


class TotalAmountByBankRow(_ReportRow):
    bank: Optional[str] = None
    total_amount: Optional[float] = None


class TransactionCountByCodeRow(_ReportRow):
    no_or_code: Optional[str] = None
    transaction_count: int = Field(..., ge=0)


class UserTransactionRow(_ReportRow):
    name: str
    transaction_count: int = Field(..., ge=0)
    average_credit: Optional[float] = None
    total_credit: Optional[float] = None


class JobResult(BaseModel):
    """Outcome of a single report job."""

    name: str
    status: Literal["succeeded", "failed"]
    rows_written: Optional[int] = None
    error_type: Optional[str] = None
    error: Optional[str] = None
    elapsed_seconds: float = 0.0


class RunSummary(BaseModel):
    """Per-job outcomes of one run, in submission order."""

    date_report: str
    results: List[JobResult] = Field(default_factory=list)

    @property
    def succeeded(self) -> List[str]:
        return [r.name for r in self.results if r.status == "succeeded"]

    @property
    def failed(self) -> List[str]:
        return [r.name for r in self.results if r.status == "failed"]

    @property
    def ok(self) -> bool:
        return not self.failed


REPORT_ROW_SCHEMAS = {
    "total_amount_by_day": TotalAmountByDayRow,
    "total_amount_by_bank": TotalAmountByBankRow,
    "transaction_count_by_code": TransactionCountByCodeRow,
    "user_transaction_report": UserTransactionRow,
}
