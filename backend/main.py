"""
FastAPI backend service for statement extraction.
"""
from fastapi import FastAPI, File, UploadFile, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
import tempfile
import shutil
from decimal import Decimal
from pathlib import Path
import logging
from typing import List, Optional

from ledger_parser import extract_statement, parse_statement
from ledger_parser.core.config import load_config
from ledger_parser.core.errors import ExtractionError
from ledger_parser.models.schema import PlainText, StatementResult, Table

app = FastAPI(title="Statement Ledger Parser", version="1.0.0")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],  # Vite and other dev servers
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ALLOWED_SUFFIXES = {".pdf", ".txt", ".csv"}


class ExtractRequest(BaseModel):
    """Already-flattened statement content."""
    text: Optional[str] = None
    rows: Optional[List[List[str]]] = None
    convert_currency: bool = False
    rate: Optional[Decimal] = None


def build_response(result: StatementResult) -> JSONResponse:
    return JSONResponse(content={
        "success": True,
        "data": result.model_dump(mode="json"),
        "counts": {
            "transactions": len(result.transactions),
            "accounts": len(result.summary)
        }
    })


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "Statement Ledger Parser API", "status": "healthy"}


@app.post("/extract")
def extract(request: ExtractRequest):
    """
    Extract a statement supplied as text or table rows.

    Args:
        request: Either text or rows, plus optional currency conversion

    Returns:
        Summary and transactions as JSON
    """
    if request.rows is not None and request.text is not None:
        raise HTTPException(status_code=400, detail="Request must contain either 'text' or 'rows', not both")
    if request.rows is not None:
        document = Table(rows=request.rows)
    elif request.text is not None:
        document = PlainText(text=request.text)
    else:
        raise HTTPException(status_code=400, detail="Request must contain 'text' or 'rows'")

    try:
        result = extract_statement(
            document,
            config=load_config(),
            convert_currency=request.convert_currency or request.rate is not None,
            rate=request.rate
        )
    except ExtractionError as e:
        logger.warning(f"Extraction failed: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error extracting statement: {e}")
        raise HTTPException(status_code=500, detail=f"Error extracting statement: {str(e)}")

    logger.info(f"Extracted {len(result.transactions)} transactions")
    return build_response(result)


@app.post("/extract-file")
def extract_file(file: UploadFile = File(...), fmt: str = "auto",
                 convert_currency: bool = False, rate: Optional[Decimal] = None):
    """
    Extract a statement from an uploaded PDF, text or CSV file.

    Args:
        file: Uploaded statement file
        fmt: Input format (auto, text, csv, pdf, pdf-table)
        convert_currency: Convert amounts into the target currency
        rate: Fixed conversion rate; fetched when omitted

    Returns:
        Summary and transactions as JSON
    """
    suffix = Path(file.filename or "").suffix.lower()
    if suffix not in ALLOWED_SUFFIXES:
        raise HTTPException(status_code=400, detail="File must be a PDF, TXT or CSV")

    tmp_path = None
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp_file:
        try:
            shutil.copyfileobj(file.file, tmp_file)
            tmp_file.close()
            tmp_path = Path(tmp_file.name)

            logger.info(f"Processing statement: {file.filename}")
            result = parse_statement(tmp_path, fmt=fmt, config=load_config(),
                                     convert_currency=convert_currency or rate is not None,
                                     rate=rate)
            return build_response(result)

        except (ExtractionError, ValueError) as e:
            logger.warning(f"Extraction failed for {file.filename}: {e}")
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error(f"Error parsing statement: {e}")
            raise HTTPException(status_code=500, detail=f"Error parsing statement: {str(e)}")

        finally:
            # Clean up temporary file
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()


@app.get("/accounts")
async def list_accounts():
    """List the configured known accounts."""
    config = load_config()
    return JSONResponse(content={
        "success": True,
        "accounts": [
            {"account_number": number, "account_name": name or config.unknown_account_name}
            for number, name in config.accounts.items()
        ]
    })


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
