from typing import Optional, Dict, Any


class NewsHubError(Exception):
    status_code = 500

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ValidationError(NewsHubError):
    status_code = 400


class ConflictError(NewsHubError):
    status_code = 409


class NotFoundError(NewsHubError):
    status_code = 404


class JobNotFoundError(NotFoundError):
    def __init__(self, job_id: int):
        super().__init__(
            message=f"Fetch job {job_id} not found",
            error_code="JOB_NOT_FOUND",
            details={"job_id": job_id}
        )


class SourceNotFoundError(NotFoundError):
    def __init__(self, source_id: int):
        super().__init__(
            message=f"Source {source_id} not found",
            error_code="SOURCE_NOT_FOUND",
            details={"source_id": source_id}
        )


class ArticleNotFoundError(NotFoundError):
    def __init__(self, article_id: int):
        super().__init__(
            message=f"Article {article_id} not found",
            error_code="ARTICLE_NOT_FOUND",
            details={"article_id": article_id}
        )
