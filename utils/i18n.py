# utils/i18n.py

import os

from dotenv import load_dotenv

LANGUAGES = ("en", "fr")

STRINGS = {
    "en": {
        "nav.store": "Home",
        "nav.orders": "My Orders",
        "nav.cart": "Cart",
        "nav.bulk": "Bulk Order",
        "auth.login": "Login",
        "auth.email": "Email",
        "auth.password": "Password",
        "auth.signin": "Sign In",
        "auth.signout": "Sign Out",
        "auth.signedInAs": "Signed in as",
        "store.selectStore": "Select Store",
        "store.allItems": "All Items",
        "store.noStore": "No store",
        "product.addToCart": "Add to Cart",
        "product.selectSize": "Select Size",
        "product.quantity": "Quantity",
        "product.kit": "Kit",
        "product.individual": "Individual Item",
        "product.includes": "Includes",
        "product.added": "added to cart",
        "cart.title": "Shopping Cart",
        "cart.kitSubtotal": "Kit Subtotal",
        "cart.individualSubtotal": "Individual Items",
        "cart.shipping": "Shipping",
        "cart.tax": "Tax",
        "cart.total": "Total",
        "cart.checkout": "Proceed to Checkout",
        "cart.empty": "Your cart is empty",
        "cart.clear": "Clear Cart",
        "cart.billedToHO": "Billed to Head Office",
        "cart.cardCharge": "Credit card charge",
        "cart.storeSubtotal": "Store subtotal",
        "cart.confirm": "Submit these orders?",
        "cart.yes": "Yes",
        "cart.no": "No",
        "bulk.title": "Bulk Order",
        "bulk.subtitle": "Order products for multiple stores at once",
        "bulk.selectStores": "Select Stores",
        "bulk.pickStore": "Please select at least one store to begin ordering",
        "bulk.addToCart": "Add to Cart",
        "bulk.createOrders": "Create Orders",
        "orders.title": "My Orders",
        "orders.none": "You have not placed any orders yet",
        "orders.number": "Order",
        "orders.store": "Store",
        "orders.date": "Date",
        "orders.status": "Status",
        "orders.payment": "Payment",
        "orders.items": "Items",
        "orders.created": "order(s) created successfully!",
        "error.generic": "Something went wrong. Please try again.",
        "error.kitConflict": "Only one kit can be ordered per cart.",
        "error.validation": "Please check your input.",
        "error.selectSize": "Please select a size.",
        "error.selectStore": "Please select at least one store.",
        "error.emptyBulk": "Please add items to your order.",
        "error.emptyCart": "Your cart is empty.",
        "error.noStore": "No store is assigned to your account.",
        "error.unauthenticated": "Please sign in to continue.",
        "error.catalogLoad": "Failed to load products.",
        "error.checkoutInProgress": "Your order is already being submitted.",
        "error.checkoutPartial": "Some orders could not be created. The remaining items are still in your cart.",
        "error.checkoutFailed": "Failed to create orders.",
        "error.orderCreate": "The order could not be created.",
        "error.orderDangling": "An order was created without items. Please contact head office.",
        "error.storageCorruption": "Your saved cart could not be read and was reset.",
    },
    "fr": {
        "nav.store": "Accueil",
        "nav.orders": "Mes Commandes",
        "nav.cart": "Panier",
        "nav.bulk": "Commande en gros",
        "auth.login": "Connexion",
        "auth.email": "Courriel",
        "auth.password": "Mot de passe",
        "auth.signin": "Se connecter",
        "auth.signout": "Se déconnecter",
        "auth.signedInAs": "Connecté en tant que",
        "store.selectStore": "Sélectionner le magasin",
        "store.allItems": "Tous les articles",
        "store.noStore": "Aucun magasin",
        "product.addToCart": "Ajouter au panier",
        "product.selectSize": "Sélectionner la taille",
        "product.quantity": "Quantité",
        "product.kit": "Ensemble",
        "product.individual": "Article individuel",
        "product.includes": "Comprend",
        "product.added": "ajouté au panier",
        "cart.title": "Panier",
        "cart.kitSubtotal": "Sous-total ensemble",
        "cart.individualSubtotal": "Articles individuels",
        "cart.shipping": "Livraison",
        "cart.tax": "Taxes",
        "cart.total": "Total",
        "cart.checkout": "Passer à la caisse",
        "cart.empty": "Votre panier est vide",
        "cart.clear": "Vider le panier",
        "cart.billedToHO": "Facturé au siège",
        "cart.cardCharge": "Montant porté à la carte",
        "cart.storeSubtotal": "Sous-total du magasin",
        "cart.confirm": "Soumettre ces commandes?",
        "cart.yes": "Oui",
        "cart.no": "Non",
        "bulk.title": "Commande en gros",
        "bulk.subtitle": "Commander des produits pour plusieurs magasins à la fois",
        "bulk.selectStores": "Sélectionner les magasins",
        "bulk.pickStore": "Veuillez sélectionner au moins un magasin pour commencer",
        "bulk.addToCart": "Ajouter au panier",
        "bulk.createOrders": "Créer les commandes",
        "orders.title": "Mes Commandes",
        "orders.none": "Vous n'avez encore passé aucune commande",
        "orders.number": "Commande",
        "orders.store": "Magasin",
        "orders.date": "Date",
        "orders.status": "Statut",
        "orders.payment": "Paiement",
        "orders.items": "Articles",
        "orders.created": "commande(s) créée(s) avec succès!",
        "error.generic": "Une erreur est survenue. Veuillez réessayer.",
        "error.kitConflict": "Un seul ensemble peut être commandé par panier.",
        "error.validation": "Veuillez vérifier votre saisie.",
        "error.selectSize": "Veuillez sélectionner une taille.",
        "error.selectStore": "Veuillez sélectionner au moins un magasin.",
        "error.emptyBulk": "Veuillez ajouter des articles à votre commande.",
        "error.emptyCart": "Votre panier est vide.",
        "error.noStore": "Aucun magasin n'est associé à votre compte.",
        "error.unauthenticated": "Veuillez vous connecter pour continuer.",
        "error.catalogLoad": "Impossible de charger les produits.",
        "error.checkoutInProgress": "Votre commande est déjà en cours d'envoi.",
        "error.checkoutPartial": "Certaines commandes n'ont pas pu être créées. Les articles restants sont toujours dans votre panier.",
        "error.checkoutFailed": "Impossible de créer les commandes.",
        "error.orderCreate": "La commande n'a pas pu être créée.",
        "error.orderDangling": "Une commande a été créée sans articles. Veuillez contacter le siège.",
        "error.storageCorruption": "Votre panier enregistré était illisible et a été réinitialisé.",
    },
}


def default_language() -> str:
    load_dotenv()
    lang = os.getenv("STOREFRONT_LANGUAGE", "en")
    return lang if lang in LANGUAGES else "en"


def t(key: str, language: str = "en") -> str:
    """Look up a UI string, falling back to English and then to the key."""
    table = STRINGS.get(language, STRINGS["en"])
    return table.get(key) or STRINGS["en"].get(key, key)
