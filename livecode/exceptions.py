from fastapi import HTTPException

class NotFoundException(HTTPException):
    def __init__(self, entity: str):
        super().__init__(status_code=404, detail=f"{entity} not found")

class ChatNotFoundException(NotFoundException):
    def __init__(self):
        super().__init__("Chat")

class MessageNotFoundException(NotFoundException):
    def __init__(self):
        super().__init__("Message")

class MissingFieldException(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail)

class InvalidTypeException(HTTPException):
    def __init__(self, valid_types):
        super().__init__(status_code=400, detail=f"Type must be one of: {', '.join(valid_types)}")

class InvalidRequestException(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=f"Invalid request: {detail}")
