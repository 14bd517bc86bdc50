"""User facing (French) HTML messages shown in the checkout status area."""

SDK_TIMEOUT = (
    "Erreur: Le SDK PayPal n'a pas pu être chargé. "
    "Veuillez vérifier votre connexion Internet et réessayer."
)

RENDER_FAILED = (
    "Erreur lors du chargement des boutons PayPal. Veuillez rafraîchir la page."
)

EMPTY_CART = "Panier vide ou données invalides"


def format_price(amount: float) -> str:
    return f"{round(amount * 100) / 100:.2f}€"


def sdk_error(error: Exception | str) -> str:
    return f"Erreur PayPal: {error}"


def create_failed(error: Exception | str, url: str) -> str:
    return (
        "Impossible d'initier le paiement PayPal...<br>"
        f"<strong>Erreur:</strong> {error}<br>"
        f"<strong>URL:</strong> {url}<br>"
        "<strong>Vérifiez votre connexion réseau et les logs du serveur.</strong>"
    )


def capture_failed(error: Exception | str, url: str) -> str:
    return (
        "<strong>✗ Erreur lors du traitement du paiement</strong><br><br>"
        f"<strong>Erreur:</strong> {error}<br>"
        f"<strong>URL:</strong> {url}<br><br>"
        "Veuillez vérifier votre connexion réseau et réessayer."
    )


def order_id_missing() -> str:
    return (
        "<strong>⚠ Attention</strong><br>"
        "La commande a été créée mais nous n'avons pas reçu le numéro de commande.<br>"
        "Veuillez vérifier vos commandes."
    )


def payment_succeeded(transaction_status: str, transaction_id: str, order_id: str) -> str:
    return (
        "<strong>✓ Transaction réussie!</strong><br>"
        f"Statut: {transaction_status}<br>"
        f"ID Transaction: {transaction_id}<br><br>"
        "<strong>Votre commande a été créée avec succès!</strong><br>"
        f"Numéro de commande: <strong>{order_id}</strong><br><br>"
        "Redirection vers vos commandes..."
    )
