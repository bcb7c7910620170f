"""
Centralized Bilingual Message System for ConceptGraph
=====================================================

Provides all user-facing messages (errors, success, warnings) in English and
Spanish. Used by the session orchestrator and API endpoints to return
localized messages.
"""

from typing import Literal

Language = Literal["en", "es"]


class Messages:
    """Centralized bilingual message system"""

    # API Error Messages
    ERRORS = {
        "internal_error": {
            "en": "Internal server error",
            "es": "Error interno del servidor"
        },
        "invalid_request": {
            "en": "Invalid request",
            "es": "Solicitud inválida"
        },
        "session_not_found": {
            "en": "Concept map session not found: {}",
            "es": "Sesión de mapa conceptual no encontrada: {}"
        },
        "node_not_found": {
            "en": "Node not found in concept map: {}",
            "es": "Nodo no encontrado en el mapa conceptual: {}"
        },
        "no_concept_map": {
            "en": "Generate a concept map first",
            "es": "Primero genera un mapa conceptual"
        },
        "no_expandable_nodes": {
            "en": "There are no concepts left to expand",
            "es": "No hay conceptos disponibles para expandir"
        },
        "generation_failed": {
            "en": "Failed to generate the concept map: {}",
            "es": "Error al generar el mapa conceptual: {}"
        },
        "expansion_failed": {
            "en": "Failed to expand the concept map: {}",
            "es": "Error al expandir conceptos: {}"
        },
        "llm_timeout": {
            "en": "The AI service took too long to respond. Please try again.",
            "es": "El servicio de IA tardó demasiado en responder. Inténtalo de nuevo."
        },
        "llm_rate_limited": {
            "en": "The AI service is busy. Please wait a moment and try again.",
            "es": "El servicio de IA está ocupado. Espera un momento e inténtalo de nuevo."
        },
        "llm_access_denied": {
            "en": "The AI service is not configured or rejected the credentials",
            "es": "El servicio de IA no está configurado o rechazó las credenciales"
        },
        "llm_content_filter": {
            "en": "The request was blocked by the AI provider's content filter",
            "es": "La solicitud fue bloqueada por el filtro de contenido del proveedor de IA"
        },
        "llm_invalid_response": {
            "en": "The AI service returned an answer that could not be used",
            "es": "El servicio de IA devolvió una respuesta que no se pudo usar"
        },
    }

    # Success Messages
    SUCCESS = {
        "concept_map_generated": {
            "en": "Concept map generated with {} nodes",
            "es": "Mapa conceptual generado con {} nodos"
        },
        "concept_map_expanded": {
            "en": "Added {} new details",
            "es": "Se agregaron {} nuevos detalles"
        },
        "session_cleared": {
            "en": "Concept map cleared",
            "es": "Mapa conceptual borrado"
        },
        "node_moved": {
            "en": "Node position updated",
            "es": "Posición del nodo actualizada"
        },
    }

    # Warning Messages
    WARNINGS = {
        "request_in_progress": {
            "en": "A request is already in progress for this concept map",
            "es": "Ya hay una solicitud en curso para este mapa conceptual"
        },
        "expansion_budget_exhausted": {
            "en": "Expansion limit reached ({} of {})",
            "es": "Límite de expansiones alcanzado ({} de {})"
        },
        "request_discarded": {
            "en": "The concept map was cleared before the request finished",
            "es": "El mapa conceptual se borró antes de que terminara la solicitud"
        },
    }

    @classmethod
    def get(cls, category: str, key: str, lang: Language = "en", *args) -> str:
        """
        Get a message in the specified language.

        Args:
            category: Message category ('ERRORS', 'SUCCESS', 'WARNINGS')
            key: Message key
            lang: Language ('en' or 'es')
            *args: Format arguments for messages with placeholders

        Returns:
            Localized message string
        """
        messages = getattr(cls, category, {})
        message_dict = messages.get(key, {})
        # Fallback order: requested lang -> en -> key
        message = message_dict.get(lang) or message_dict.get("en") or key

        if args:
            try:
                return message.format(*args)
            except (IndexError, KeyError):
                return message

        return message

    @classmethod
    def error(cls, key: str, lang: Language = "en", *args) -> str:
        """Get an error message"""
        return cls.get("ERRORS", key, lang, *args)

    @classmethod
    def success(cls, key: str, lang: Language = "en", *args) -> str:
        """Get a success message"""
        return cls.get("SUCCESS", key, lang, *args)

    @classmethod
    def warning(cls, key: str, lang: Language = "en", *args) -> str:
        """Get a warning message"""
        return cls.get("WARNINGS", key, lang, *args)


# Convenience function for getting language from request
def get_request_language(language_header: str = None, accept_language: str = None) -> Language:
    """
    Determine language from request headers.

    Args:
        language_header: Custom X-Language header
        accept_language: Accept-Language header

    Returns:
        'en' or 'es'
    """
    # Priority 1: Custom X-Language header
    if language_header:
        lang = language_header.lower()
        if lang in ["es", "es-es", "es-pe", "es-mx", "spanish", "español"]:
            return "es"
        return "en"

    # Priority 2: Accept-Language header
    if accept_language:
        lang = accept_language.lower()
        if lang.startswith("es") or "spanish" in lang:
            return "es"

    # Default: English
    return "en"
