from __future__ import annotations

from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse

from ..errors import ErrorKind, Result
from ..schemas import ProblemDetails, TodoOut
from ..service import TodoService, get_todo_service

router = APIRouter(
    prefix="/todo",
    tags=["todo"],
)

GET_BY_ID_ROUTE = "get_todo_by_id"


def _error_response(result: Result) -> Response:
    """
    Map a failed Result to its HTTP response.
    - NOT_FOUND: 404 with no body
    - PERSISTENCE_REJECTED: 400 with a problem body
    - STORAGE_FAILURE: 500 with a problem body carrying the error detail
    """
    if result.error is ErrorKind.NOT_FOUND:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    if result.error is ErrorKind.PERSISTENCE_REJECTED:
        problem = ProblemDetails(title=result.detail or "Request rejected", status=status.HTTP_400_BAD_REQUEST)
    else:
        problem = ProblemDetails(
            type=result.error_type,
            title="Storage failure",
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=result.detail,
        )
    return JSONResponse(status_code=problem.status, content=problem.model_dump(exclude_none=True))


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description="Return every Todo item in storage order.",
    responses={
        200: {"description": "List retrieved successfully"},
        500: {"model": ProblemDetails, "description": "Storage failure"},
    },
)
def list_todos(service: TodoService = Depends(get_todo_service)) -> Union[List[TodoOut], Response]:
    """
    List all todos.
    """
    result = service.list_todos()
    if not result.ok:
        return _error_response(result)
    return [TodoOut(**it) for it in result.value or []]


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    name=GET_BY_ID_ROUTE,
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={
        200: {"description": "Todo found"},
        404: {"description": "Todo not found"},
        500: {"model": ProblemDetails, "description": "Storage failure"},
    },
)
def get_todo(todo_id: str, service: TodoService = Depends(get_todo_service)) -> Union[TodoOut, Response]:
    """
    Retrieve a single Todo item by its ID.
    """
    result = service.get_todo(todo_id)
    if not result.ok:
        return _error_response(result)
    return TodoOut(**result.value)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.post(
    "/CreateTodo",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description=(
        "Create a new Todo item. The title is passed as the 'todoTitle' query parameter. "
        "The Location header points at the created resource."
    ),
    responses={
        201: {"description": "Todo created successfully"},
        400: {"model": ProblemDetails, "description": "Todo could not be saved"},
        500: {"model": ProblemDetails, "description": "Storage failure"},
    },
)
def create_todo(
    request: Request,
    response: Response,
    todo_title: Optional[str] = Query(None, alias="todoTitle", description="Title of the new todo"),
    service: TodoService = Depends(get_todo_service),
) -> Union[TodoOut, Response]:
    """
    Create a new Todo from the query-string title.
    """
    result = service.create_todo(todo_title)
    if not result.ok:
        return _error_response(result)
    created = TodoOut(**result.value)  # type: ignore[arg-type]
    response.headers["Location"] = str(request.url_for(GET_BY_ID_ROUTE, todo_id=created.id))
    return created


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_200_OK,
    response_class=Response,
    summary="Delete Todo",
    description="Delete a Todo item by ID.",
    responses={
        200: {"description": "Todo deleted"},
        404: {"description": "Todo not found"},
        500: {"model": ProblemDetails, "description": "Storage failure"},
    },
)
def delete_todo(todo_id: str, service: TodoService = Depends(get_todo_service)) -> Response:
    """
    Delete a Todo. Returns 200 with an empty body on success, 404 if not found.
    """
    result = service.delete_todo(todo_id)
    if not result.ok:
        return _error_response(result)
    return Response(status_code=status.HTTP_200_OK)
