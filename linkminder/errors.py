class LinkMinderError(Exception):
    """Base class for rejected user input."""


class InvalidLinkError(LinkMinderError):
    pass


class LinkNotFoundError(LinkMinderError):
    def __init__(self, url: str, text: str):
        super().__init__(f'No link "{text}" ({url})')
        self.url = url
        self.text = text


class UnknownSortCriterionError(LinkMinderError):
    pass


class InvalidReminderError(LinkMinderError):
    pass
