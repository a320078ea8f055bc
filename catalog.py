"""Store constants and the pure helpers the storefront uses over the product list."""
import re

CATEGORIES = [
    "Para la Clínica",
    "Para Mamita",
    "Mi llegada a casa",
    "Aseo",
    "Mis accesorios",
    "Extras importantes",
]

SEARCH_FIELDS = ("name", "description", "category")

INITIAL_SETTINGS = {
    "whatsapp_number": "+573227772131",
    "store_name": "Todo Baby Rio",
    "instagram": "https://www.instagram.com/todobabyrio/",
    "facebook": "https://www.facebook.com/profile.php?id=100068834140041",
    "tiktok": "https://tiktok.com/@todobaby",
    "address": "Calle 14 #8-25, Local 109, Riohacha, La Guajira",
    "about_us": (
        "En Todo Baby Rio, entendemos que la llegada de un bebé es el comienzo de una increíble aventura. "
        "Nacimos en el corazón de Riohacha con el propósito de ser más que una tienda: queremos ser tu "
        "compañero de confianza en cada paso. Ofrecemos una cuidada selección de productos que garantizan "
        "la seguridad, el confort y el bienestar de tu pequeño, desde artículos de higiene formulados con "
        "ingredientes naturales hasta los accesorios más prácticos para el día a día."
    ),
    "mission": (
        "Acompañar a las familias en la maravillosa etapa de la paternidad, ofreciendo productos de la más "
        "alta calidad, seguros y delicados, que garanticen el bienestar y confort de cada bebé en Riohacha "
        "y La Guajira."
    ),
    "vision": (
        "Ser la tienda para bebés de referencia en La Guajira, reconocida por nuestra selección experta de "
        "productos, el asesoramiento cercano y una comunidad de apoyo que celebra el crecimiento y la "
        "felicidad de cada niño."
    ),
    "values": [
        {"title": "Calidad y Seguridad", "description": "Cada producto es seleccionado rigurosamente, priorizando fórmulas hipoalergénicas y materiales seguros para la delicada piel de tu bebé."},
        {"title": "Confianza", "description": "Actuamos con transparencia y honestidad, construyendo relaciones duraderas con nuestros clientes."},
        {"title": "Cercanía", "description": "Ofrecemos un trato cálido y personalizado, escuchando las necesidades de cada familia."},
        {"title": "Compromiso", "description": "Estamos dedicados al bienestar de los más pequeños y a la tranquilidad de sus padres."},
    ],
    "logo_url": "https://lh3.googleusercontent.com/pw/AP1GczNWx_WgPtf8IncAvSxqO9iMkm27LcCxzzqaYAZ2qFhOZRCXo9bfLaQ29Mio2UGiFZkEHfZBmUIhYO_hZgWhfOdJvk9zQFZ1smwHZucyzi6cfeciul3or1JEVl4bSEWcZAUIibrXFHy7WMX4IezVIJ7R=w636-h203-s-no-gm?authuser=0",
    "banner_url": "https://picsum.photos/seed/banner/1200/400",
}

# Checklist of what a family needs, per category; the demo catalogue is built from it.
SURTILISTA = {
    "Para la Clínica": ["Pañales desechables R.N.", "Pañitos húmedos", "Crema antipañalitis", "Toallas", "Juegos de sábanas (x2)", "Cobijas", "Pijamas (primer día)", "Medias (escarpines)", "Mitones", "Gorritos", "1 Biberón", "Termo", "1 Babero (saca gases)", "Fajeros", "Bolso pañalera"],
    "Para Mamita": ["Toallas maternas", "Dos batas", "Pantuflas", "Lacti Nosotras", "Jabón", "Jabonera", "Sábanas", "Toalla de baño", "Salida de baño", "Almohadas"],
    "Mi llegada a casa": ["Corral o cuna", "Colchoneta", "Coche", "Juego de sabanitas con funda", "Ule (cambiador plástico)", "3 Almohadas", "1 Semanario", "1 Semanario de babero", "4 Pijamas", "Pañalera", "Canastilla", "Toldo", "Protector de cuna", "Móvil musical", "Cargador de bebé", "Ropita"],
    "Aseo": ["Pañales x 30 etapa 1", "Toallitas húmedas", "Jabón", "Shampoo", "Colonia", "Copitos", "Crema líquida", "Baño líquido antes de dormir", "Algodón, gasa, alcohol, esparadrapo", "Aceite", "Isodine", "Agua oxigenada", "Toallas, salida de baño", "Pantuflas"],
    "Mis accesorios": ["Bañera", "Jabón esponja", "Mosquitero", "Set de manicure", "Termómetro digital", "Jabonera", "Dosificador de medicamentos", "Cepillo de peinar", "Pera nasal", "Rasca encías", "Lavateteros", "Teteros de 2 oz, 4 oz, 9 oz", "Vaso pitillo", "Porta teteros", "Extractor de leche", "Termo para el agua", "Olla para calentar teteros", "Calentador de teteros"],
    "Extras importantes": ["Crema para pezones agrietados", "Almohada para lactancia", "Té para lactar", "App de ruido blanco", "Extractor de leche"],
}


def _matches(product, needle):
    for field in SEARCH_FIELDS:
        if needle in (product.get(field) or "").lower():
            return True
    return any(needle in (tag or "").lower() for tag in product.get("tags") or [])


def filter_products(products, category=None, query=""):
    """Category is an exact match, query a case-insensitive substring over name,
    description, category and tags. Order of ``products`` is preserved."""
    needle = (query or "").strip().lower()
    result = []
    for p in products:
        if category and p.get("category") != category:
            continue
        if needle and not _matches(p, needle):
            continue
        result.append(p)
    return result


def storefront_products(products):
    return [p for p in products if p.get("status", "Active") == "Active"]


def find_product(products, product_id):
    return next((p for p in products if p.get("id") == product_id), None)


def related_products(products, product, limit=4):
    return [
        p for p in products
        if p.get("category") == product.get("category") and p.get("id") != product.get("id")
    ][:limit]


def name_tags(name, category):
    words = re.sub(r"[^\w\s]", "", name.lower()).split()
    tags = [category.lower()]
    for w in words:
        if w not in tags:
            tags.append(w)
    return tags


def seed_products():
    """Demo catalogue, one product per checklist entry. Prices and stock are
    deterministic so reseeding gives the same store."""
    products = []
    n = 0
    for category, names in SURTILISTA.items():
        for name in names:
            n += 1
            products.append({
                "name": name,
                "sku": f"TB-{n:04d}",
                "description": (
                    f"La solución perfecta para tu bebé. {name} de la más alta calidad, "
                    "pensado para el cuidado y confort que tu pequeño merece."
                ),
                "category": category,
                "subcategory": "",
                "price": round(5 + (n * 7.37) % 75, 2),
                "stock": 10 + (n * 13) % 50,
                "status": "Active",
                "images": [f"https://picsum.photos/seed/p{n}/400/400"],
                "colors": ["Varios"],
                "sizes": ["N/A"],
                "material": "",
                "tags": name_tags(name, category),
                "hashtags": [],
            })
    return products
