from typing import Literal, Optional
from pydantic import BaseModel, Field

class ClassifyRequest(BaseModel):
    content: str = Field(..., description="Decoded QR/barcode payload, may be empty.")
    precedence: Optional[Literal["legacy", "prefix_first"]] = Field(
        None,
        description="Recognizer order; defaults to the server setting.",
    )

class ScanRequest(BaseModel):
    content: str = Field(..., min_length=1, description="Decoded QR/barcode payload.")
    user_id: Optional[int] = Field(None, ge=1)

class AnalyseRequest(BaseModel):
    url: str = Field(..., min_length=1)

class UnlockRequest(BaseModel):
    user_id: int = Field(..., ge=1)

class FavoriteRequest(BaseModel):
    is_favorite: bool = Field(..., description="Current favorite state of the scan.")
