"""
Custom exception classes for the recipe assistant

Every exception carries a short, user-facing message (German, like the app UI)
so callers can show a notification without leaking internals.
"""


class RecipeAssistantError(Exception):
    """Base exception for the recipe assistant"""
    user_message = "Ein unerwarteter Fehler ist aufgetreten."


# --- Storage ---

class StorageError(RecipeAssistantError):
    """Raised when a collection cannot be written"""
    user_message = "Fehler beim Speichern."


class StorageFullError(StorageError):
    """Raised when a write would exceed the storage capacity"""
    user_message = (
        "Speicherplatz voll! Bitte lösche alte Rezepte oder verwende ein kleineres Bild."
    )

    def __init__(self, key: str, required_bytes: int = None, quota_bytes: int = None):
        self.key = key
        self.required_bytes = required_bytes
        self.quota_bytes = quota_bytes
        if required_bytes is not None and quota_bytes is not None:
            super().__init__(
                f"Storage full while writing '{key}': {required_bytes} bytes needed, quota is {quota_bytes}"
            )
        else:
            super().__init__(f"Storage full while writing '{key}'")


class StorageWriteError(StorageError):
    """Raised for write failures other than exhausted capacity"""
    def __init__(self, key: str, error: str):
        self.key = key
        self.error = error
        super().__init__(f"Failed to write '{key}': {error}")


# --- Recipes ---

class InvalidServingsError(RecipeAssistantError):
    """Raised when a serving count is not a positive integer"""
    user_message = "Die Anzahl der Portionen muss mindestens 1 sein."

    def __init__(self, servings):
        self.servings = servings
        super().__init__(f"Invalid servings: {servings!r}")


class RecipeNotFoundError(RecipeAssistantError):
    """Raised when a requested recipe is not stored"""
    user_message = "Rezept nicht gefunden."

    def __init__(self, recipe_name: str):
        self.recipe_name = recipe_name
        super().__init__(f"Recipe '{recipe_name}' not found")


class NoActiveRecipeError(RecipeAssistantError):
    """Raised when a session action needs a shown recipe but none is shown"""
    user_message = "Es wird gerade kein Rezept angezeigt."

    def __init__(self):
        super().__init__("No recipe is currently shown")


# --- AI Gateway ---

class ChefGatewayError(RecipeAssistantError):
    """Base exception for AI gateway failures"""
    user_message = "Fehler bei der KI-Anfrage."


class AIConfigurationError(ChefGatewayError):
    """Raised when the AI service is not configured"""
    user_message = "Der KI-Dienst ist nicht konfiguriert."

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(f"{setting} not found in environment variables")


class ServerLimitReachedError(ChefGatewayError):
    """Raised when rate limiting persists after every retry"""
    user_message = "Server-Limit erreicht. Bitte versuche es gleich noch einmal."

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Server limit reached after {attempts} attempts")


class AIServiceError(ChefGatewayError):
    """Raised when the model call fails for a non-retryable reason"""
    def __init__(self, original_error: str):
        self.original_error = original_error
        super().__init__(f"AI request failed: {original_error}")

    @property
    def user_message(self) -> str:
        return f"Fehler bei der KI-Anfrage. ({self.original_error})"


class ReplyParseError(ChefGatewayError):
    """Raised when the model reply is not valid JSON of the expected shape"""
    user_message = "Die Antwort des Chefs konnte nicht gelesen werden. Bitte versuche es erneut."

    def __init__(self, request_type: str, error: str):
        self.request_type = request_type
        self.error = error
        super().__init__(f"Could not parse '{request_type}' reply: {error}")


class ImageUnreadableError(ChefGatewayError):
    """Raised when the vision model reports an unreadable image"""
    def __init__(self, reason: str = None):
        self.reason = reason
        super().__init__(f"Image not readable: {reason or 'no reason given'}")

    @property
    def user_message(self) -> str:
        return self.reason or "Bild nicht lesbar. Bitte näher herangehen."


class UnsupportedRequestError(ChefGatewayError):
    """Raised for an unknown AI request type"""
    user_message = "Ungültiger Request-Typ."

    def __init__(self, request_type: str):
        self.request_type = request_type
        super().__init__(f"Unsupported request type: {request_type!r}")


def user_message_for(error: Exception) -> str:
    """Map any exception to a short notification text"""
    if isinstance(error, RecipeAssistantError):
        return error.user_message
    return RecipeAssistantError.user_message
