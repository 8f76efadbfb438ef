"""
Domain exceptions

Not-found results are returned as None / False, these cover the remaining
failures the API maps to client errors.
"""


class ChapterOrderConflictError(Exception):
    """The story already has a chapter at this order number"""

    def __init__(self, story_id: str, order_num: int):
        self.story_id = story_id
        self.order_num = order_num
        super().__init__(f"Story {story_id} already has a chapter #{order_num}")


class UploadRejectedError(Exception):
    """Uploaded file has a disallowed type or is too large"""
