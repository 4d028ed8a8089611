"""Erreurs métier — converties en {"error": message} par les handlers de l'app."""


class SelectionError(Exception):
    status_code = 400
    message = "Request failed"

    def __init__(self, message: str | None = None):
        if message:
            self.message = message
        super().__init__(self.message)


class InvalidInput(SelectionError):
    message = "Invalid selection data. Block IDs must be an array."


class UnknownReference(SelectionError):
    message = "One or more block IDs are invalid or do not exist."


class BackendFailure(SelectionError):
    """Toute panne du store, sans distinction (connexion, timeout, contrainte)."""
    status_code = 500
    message = "Internal server error"
