from fastapi import APIRouter, Depends, Query, Request, status
from typing import Optional
import logging

from string_analyzer import crud, schemas
from string_analyzer.store import RecordStore, get_store

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/strings", response_model=schemas.StringRecord, status_code=status.HTTP_201_CREATED)
def create_string(string_data: schemas.StringCreate, store: RecordStore = Depends(get_store)):
    """
    Analyze and store a string.
    Returns 409 if string already exists.
    """
    return crud.create_string(store, string_data.value)


@router.get("/strings", response_model=schemas.StringListResponse)
def get_all_strings(request: Request, store: RecordStore = Depends(get_store)):
    """
    Get all strings with optional filtering.

    Supported query parameters: is_palindrome, min_length, max_length,
    word_count, contains_character. Anything else is rejected with 400.
    """
    result = crud.list_strings(store, dict(request.query_params))
    return schemas.StringListResponse(
        data=result.data,
        count=len(result.data),
        filters_applied=result.applied
    )


@router.get("/strings/filter-by-natural-language", response_model=schemas.NaturalLanguageResponse)
def filter_by_natural_language(
    query: Optional[str] = Query(None, description="Natural language query"),
    store: RecordStore = Depends(get_store)
):
    """
    Filter strings using natural language queries.
    Example: "all single word palindromic strings"
    """
    result, parsed = crud.filter_by_natural_language(store, query)
    return schemas.NaturalLanguageResponse(
        data=result.data,
        count=len(result.data),
        interpreted_query=schemas.InterpretedQuery(original=query, parsed_filters=parsed)
    )


@router.get("/strings/{string_value:path}", response_model=schemas.StringRecord)
def get_string(string_value: str, store: RecordStore = Depends(get_store)):
    """
    Get analysis for a specific string.
    Returns 404 if string doesn't exist.
    """
    return crud.get_string(store, string_value)


@router.delete("/strings/{string_value:path}", status_code=status.HTTP_204_NO_CONTENT)
def delete_string(string_value: str, store: RecordStore = Depends(get_store)):
    """
    Delete a string from the system.
    Returns 404 if string doesn't exist.
    """
    crud.delete_string(store, string_value)
    return None
