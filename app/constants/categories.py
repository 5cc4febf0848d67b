"""Taxonomy constants — single source of truth for the backend.

Must stay in sync with:
  frontend: src/lib/constants.ts
"""

# Every machine belongs to this domain tag; it always leads `categories`.
DEFAULT_DOMAIN_TAG = 'construction'

# Site content record types (banners, categories and phases share one table)
CONTENT_TYPES = {
    'banner',
    'category',
    'phase',
}

AVAILABILITY_STATUSES = {'available', 'rented', 'maintenance'}

# Work phase -> machine types used during that phase
WORK_PHASES = {
    'Canteiro de obras': [
        'Geradores',
        'Compressores',
        'Ferramentas Elétricas',
        'Ferramentas Manuais',
        'Equipamentos de Segurança',
    ],
    'Cobertura': [
        'Andaimes',
        'Escadas',
        'Guinchos',
        'Plataformas Elevatórias',
    ],
    'Fundação': [
        'Escavadeiras',
        'Retroescavadeiras',
        'Compactadores',
        'Placas Vibratórias',
    ],
    'Estrutura e alvenaria': [
        'Betoneiras',
        'Vibradores de Concreto',
        'Bombas de Concreto',
        'Andaimes',
        'Escoras',
        'Formas',
    ],
    'Inst. elétricas e hidrossanitárias': [
        'Furadeiras',
        'Marteletes',
        'Ferramentas Elétricas',
        'Equipamentos de Medição',
    ],
    'Esquadrias': [
        'Serras',
        'Furadeiras',
        'Parafusadeiras',
        'Ferramentas Manuais',
    ],
    'Revestimento': [
        'Lixadeiras',
        'Misturadores',
        'Desempenadeiras',
        'Réguas Vibratórias',
    ],
    'Acabamento': [
        'Lixadeiras',
        'Pinturas',
        'Compressores',
        'Ferramentas Manuais',
    ],
    'Jardinagem': [
        'Cortadores de Grama',
        'Roçadeiras',
        'Motosserras',
        'Ferramentas de Jardim',
    ],
    'Limpeza': [
        'Lavadoras de Alta Pressão',
        'Aspiradores',
        'Varredeiras',
        'Equipamentos de Limpeza',
    ],
}

# Machine group -> machine types (subcategories)
MACHINE_SUBCATEGORIES = {
    'Movimentação de Terra': [
        'Escavadeiras',
        'Retroescavadeiras',
        'Pás-carregadeiras',
        'Mini-carregadeiras',
    ],
    'Compactação': [
        'Compactadores',
        'Placas Vibratórias',
        'Rolos Compactadores',
    ],
    'Concretagem': [
        'Betoneiras',
        'Vibradores de Concreto',
        'Bombas de Concreto',
    ],
    'Elevação': [
        'Guindastes',
        'Guinchos',
        'Plataformas Elevatórias',
    ],
    'Estruturas': [
        'Andaimes',
        'Escoras',
        'Formas',
    ],
    'Energia e Ar': [
        'Geradores',
        'Compressores',
    ],
    'Ferramentas': [
        'Ferramentas Elétricas',
        'Ferramentas Manuais',
        'Equipamentos de Pintura',
        'Equipamentos de Solda',
        'Equipamentos de Corte',
    ],
    'Equipamentos de Apoio': [
        'Equipamentos de Medição',
        'Equipamentos de Segurança',
    ],
}

_UNSPLASH = 'https://images.unsplash.com/{}?auto=format&fit=crop&q=80&w=800'

DEFAULT_CATEGORY_IMAGE = {
    'url': _UNSPLASH.format('photo-1581094288338-2314dddb7ece'),
    'alt': 'Máquinas de construção civil em um canteiro de obras',
    'credit': {
        'photographer': 'Unsplash',
        'source': 'https://unsplash.com/photos/construction-site-machines',
    },
}

# Main categories shown on the home page ("Tipo de Trabalho")
MAIN_CATEGORIES = [
    {
        'id': 'construction',
        'name': 'Construção Civil',
        'image_url': _UNSPLASH.format('photo-1541888946425-d81bb19240f5'),
        'description': 'Serviços gerais de construção civil',
        'icon': 'construction',
        'colors': {
            'primary_color': '#2c3e50',
            'secondary_color': '#34495e',
            'text_color': '#ffffff',
        },
    },
    {
        'id': 'construction-equipment',
        'name': 'Máquinas e equipamentos para construção civil',
        'image_url': _UNSPLASH.format('photo-1581094288338-2314dddb7ece'),
        'description': 'Equipamentos específicos para construção',
    },
    {
        'id': 'earth-moving',
        'name': 'Movimentação de Terra',
        'image_url': _UNSPLASH.format('photo-1517649763962-0c623066013b'),
        'description': 'Serviços de movimentação e preparação de terreno',
    },
    {
        'id': 'concrete',
        'name': 'Concretagem',
        'image_url': _UNSPLASH.format('photo-1589939705384-5185137a7f0f'),
        'description': 'Serviços de concretagem e fundação',
    },
    {
        'id': 'elevation',
        'name': 'Elevação',
        'image_url': _UNSPLASH.format('photo-1495555687398-3f50d6e79e1e'),
        'description': 'Equipamentos para elevação e transporte vertical',
    },
    {
        'id': 'tools',
        'name': 'Ferramentas',
        'image_url': _UNSPLASH.format('photo-1581241309152-a3d5f6fa52f2'),
        'description': 'Ferramentas diversas para construção',
    },
]


def machine_types_for(category_id: str) -> list[str]:
    """Return the machine types (subcategory names) seeded for a main category.

    The construction domain covers every machine type plus every work phase;
    other main categories map onto the machine group sharing their name.
    """
    if category_id == DEFAULT_DOMAIN_TAG:
        types = [t for group in MACHINE_SUBCATEGORIES.values() for t in group]
        return types + list(WORK_PHASES)

    for category in MAIN_CATEGORIES:
        if category['id'] == category_id:
            return list(MACHINE_SUBCATEGORIES.get(category['name'], []))
    return []


def validate_content_type(content_type: str) -> tuple[str, str | None]:
    """Validate a site content type.

    Returns:
        (normalized_type, error_message)
        error_message is None when valid.
    """
    normalized = (content_type or '').lower().strip()
    if normalized not in CONTENT_TYPES:
        return normalized, (
            f"Invalid content type '{content_type}'. "
            f"Valid types: {', '.join(sorted(CONTENT_TYPES))}"
        )
    return normalized, None


def validate_availability_status(status: str) -> tuple[str, str | None]:
    """Validate a machine availability status.

    Returns:
        (normalized_status, error_message)
        error_message is None when valid.
    """
    normalized = status.lower().strip() if isinstance(status, str) else ''
    if normalized not in AVAILABILITY_STATUSES:
        return normalized, (
            f"Invalid availability status '{status}'. "
            f"Valid statuses: {', '.join(sorted(AVAILABILITY_STATUSES))}"
        )
    return normalized, None
