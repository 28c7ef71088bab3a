"""
Ready-made services a new shop can start from.

Each template carries the fields of a ``Service``. Creating a service from a
template copies these values, with any of ``TEMPLATE_OVERRIDABLE_FIELDS``
replaced by what the caller sends.
"""

from decimal import Decimal

TEMPLATE_OVERRIDABLE_FIELDS = (
    "name", "description", "price", "duration_minutes", "color", "is_active",
    "requires_appointment", "max_pets_per_session", "available_days", "available_hours",
)

MON_TO_FRI = [1, 2, 3, 4, 5]
MON_TO_SAT = [1, 2, 3, 4, 5, 6]
EVERY_DAY = [1, 2, 3, 4, 5, 6, 7]


def _hours(start, end):
    return {"start": start, "end": end}


SERVICE_TEMPLATES = [
    {
        "id": "banho-simples",
        "name": "Banho Simples",
        "category": "banho",
        "description": "Banho básico com shampoo neutro, secagem e escovação.",
        "price": Decimal("35.00"),
        "duration_minutes": 60,
        "popular": True,
        "max_pets_per_session": 1,
        "available_days": MON_TO_SAT,
        "available_hours": _hours("08:00", "17:00"),
    },
    {
        "id": "banho-tosa",
        "name": "Banho e Tosa Completa",
        "category": "banho-e-tosa",
        "description": "Banho, tosa higiênica, corte de unhas e limpeza de ouvidos.",
        "price": Decimal("65.00"),
        "duration_minutes": 120,
        "popular": True,
        "max_pets_per_session": 1,
        "available_days": MON_TO_SAT,
        "available_hours": _hours("08:00", "16:00"),
    },
    {
        "id": "tosa-bebe",
        "name": "Tosa Bebê",
        "category": "tosa",
        "description": "Tosa especial para filhotes.",
        "price": Decimal("45.00"),
        "duration_minutes": 90,
        "popular": False,
        "max_pets_per_session": 1,
        "available_days": MON_TO_FRI,
        "available_hours": _hours("09:00", "16:00"),
    },
    {
        "id": "consulta-veterinaria",
        "name": "Consulta Veterinária",
        "category": "consulta",
        "description": "Consulta clínica geral com exame físico completo.",
        "price": Decimal("80.00"),
        "duration_minutes": 45,
        "popular": True,
        "max_pets_per_session": 1,
        "available_days": MON_TO_FRI,
        "available_hours": _hours("08:00", "18:00"),
    },
    {
        "id": "vacinacao",
        "name": "Vacinação",
        "category": "vacina",
        "description": "Aplicação de vacinas com carteirinha atualizada.",
        "price": Decimal("50.00"),
        "duration_minutes": 30,
        "popular": False,
        "max_pets_per_session": 3,
        "available_days": MON_TO_FRI,
        "available_hours": _hours("08:00", "17:00"),
    },
    {
        "id": "hospedagem-diaria",
        "name": "Hospedagem Diária",
        "category": "hotel",
        "description": "Hospedagem com alimentação, passeios e cuidados especiais.",
        "price": Decimal("60.00"),
        "duration_minutes": 1440,
        "popular": False,
        "max_pets_per_session": 1,
        "available_days": EVERY_DAY,
        "available_hours": _hours("07:00", "19:00"),
    },
    {
        "id": "day-care",
        "name": "Day Care",
        "category": "daycare",
        "description": "Cuidados durante o dia com socialização e atividades.",
        "price": Decimal("40.00"),
        "duration_minutes": 480,
        "popular": True,
        "max_pets_per_session": 5,
        "available_days": MON_TO_FRI,
        "available_hours": _hours("07:00", "18:00"),
    },
    {
        "id": "transporte",
        "name": "Transporte Pet",
        "category": "outros",
        "description": "Busca e entrega do pet com segurança.",
        "price": Decimal("25.00"),
        "duration_minutes": 60,
        "popular": False,
        "max_pets_per_session": 2,
        "available_days": MON_TO_SAT,
        "available_hours": _hours("08:00", "18:00"),
    },
    {
        "id": "sessao-fotos",
        "name": "Sessão de Fotos",
        "category": "outros",
        "description": "Ensaio fotográfico profissional do pet.",
        "price": Decimal("120.00"),
        "duration_minutes": 90,
        "popular": False,
        "max_pets_per_session": 1,
        "available_days": MON_TO_SAT,
        "available_hours": _hours("09:00", "17:00"),
    },
]

_BY_ID = {template["id"]: template for template in SERVICE_TEMPLATES}


def get_template(template_id):
    return _BY_ID.get(template_id)


def search_templates(search=None, category=None):
    """Templates matching ``search`` (name or description) and ``category``."""
    results = SERVICE_TEMPLATES
    if category and category != "all":
        results = [t for t in results if t["category"] == category]
    if search:
        needle = search.lower()
        results = [t for t in results if needle in t["name"].lower() or needle in t["description"].lower()]
    return results


def service_data_from_template(template, overrides=None):
    """Payload for ``ServiceSerializer`` built from ``template`` plus caller overrides."""
    data = {
        "name": template["name"],
        "description": template["description"],
        "category": template["category"],
        "price": str(template["price"]),
        "duration_minutes": template["duration_minutes"],
        "requires_appointment": True,
        "max_pets_per_session": template["max_pets_per_session"],
        "available_days": list(template["available_days"]),
        "available_hours": dict(template["available_hours"]),
    }
    for field, value in (overrides or {}).items():
        if field in TEMPLATE_OVERRIDABLE_FIELDS:
            data[field] = value
    return data
