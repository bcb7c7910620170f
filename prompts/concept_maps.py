"""
Concept Maps Prompts

This module contains the prompts used by the concept map generation and
expansion agents, in English and Spanish.

Templates are filled with str.format(); literal JSON braces are doubled.
"""

# ============================================================================
# DEPTH PROFILE DETAIL INSTRUCTIONS
# ============================================================================

CONCEPT_MAP_DEPTH_DETAILS_EN = {
    "shallow": "3-4 main concepts, each with a description, and no sub-concepts",
    "standard": "4-5 main concepts, each with a description and 2-3 sub-concepts that also have a description",
    "deep": "4-5 main concepts with detailed descriptions, each with 2-3 described sub-concepts and 2 concrete examples per sub-concept",
}

CONCEPT_MAP_DEPTH_DETAILS_ES = {
    "shallow": "conceptos principales (3-4) con descripción, sin subconceptos",
    "standard": "conceptos principales (4-5) con descripción, cada uno con 2-3 subconceptos que también tengan descripción",
    "deep": "conceptos principales (4-5) con descripción detallada, cada uno con 2-3 subconceptos con descripción y 2 ejemplos concretos",
}

# ============================================================================
# GENERATION PROMPTS
# ============================================================================

CONCEPT_MAP_SYSTEM_EN = "You are an educational assistant who builds concept maps for teachers. You always answer with valid JSON and never use markdown."

CONCEPT_MAP_SYSTEM_ES = "Eres un asistente educativo experto en crear mapas conceptuales. Siempre respondes con JSON válido sin formato markdown."

CONCEPT_MAP_GENERATION_EN = """You are an expert educator. Generate a COMPLETE and EDUCATIONAL concept map about "{topic}" for students in grade {grade} of {education_level} education.

IMPORTANT REQUIREMENTS:
- Level of detail: {depth_details}
- Every concept MUST have a clear, educational description (a definition)
- Every sub-concept MUST have its own description
- Use language appropriate for {education_level} students in grade {grade}
- Concepts must be accurate and complete
- Relations must use linking verbs such as "has", "produces", "requires", "includes", "is divided into", "is characterized by"

Answer ONLY with valid JSON (no markdown, no explanations) using exactly this structure:
{{
  "concepts": [
    {{
      "name": "Main concept",
      "description": "Clear educational definition of the concept",
      "relation": "linking verb",
      "sub_concepts": [
        {{
          "name": "Sub-concept",
          "description": "Clear definition of the sub-concept",
          "examples": ["Concrete example 1", "Concrete example 2"]
        }}
      ]
    }}
  ]
}}"""

CONCEPT_MAP_GENERATION_ES = """Eres un experto educador. Genera un mapa conceptual COMPLETO y EDUCATIVO sobre "{topic}" para estudiantes de {grade} grado de {education_level}.

REQUISITOS IMPORTANTES:
- Nivel de detalle: {depth_details}
- Cada concepto DEBE tener una descripción clara y educativa (definición)
- Cada subconcepto DEBE tener su propia descripción/definición
- Usa lenguaje apropiado para estudiantes de {education_level} {grade}
- Los conceptos deben ser educativamente precisos y completos
- Las relaciones deben usar verbos conectores como: "tiene", "produce", "requiere", "incluye", "se divide en", "se caracteriza por", etc.

Responde SOLO con un JSON válido (sin markdown, sin explicaciones) con esta estructura exacta:
{{
  "conceptos": [
    {{
      "nombre": "Concepto Principal",
      "descripcion": "Definición clara y educativa del concepto",
      "relacion": "verbo conector",
      "subconceptos": [
        {{
          "nombre": "Subconcepto",
          "descripcion": "Definición clara del subconcepto",
          "ejemplos": ["Ejemplo concreto 1", "Ejemplo concreto 2"]
        }}
      ]
    }}
  ]
}}"""

# ============================================================================
# EXPANSION PROMPTS
# ============================================================================

CONCEPT_MAP_EXPANSION_SYSTEM_EN = "You are an expert educational assistant. You answer only with valid JSON and never use markdown."

CONCEPT_MAP_EXPANSION_SYSTEM_ES = "Eres un asistente educativo experto. Respondes solo con JSON válido sin formato markdown."

CONCEPT_MAP_EXPANSION_EN = """You are an expert educator. Go DEEPER into the following concepts of the topic "{topic}" for students in grade {grade} of {education_level} education.

Concepts to expand:
{target_list}

For EACH concept, generate 2-3 more specific sub-details with their definitions.
Copy each concept name exactly as written above into "target".

Answer ONLY with valid JSON (no markdown) using this structure:
{{
  "expansions": [
    {{
      "target": "Original concept name",
      "details": [
        {{
          "name": "Specific sub-detail",
          "description": "Clear educational definition"
        }}
      ]
    }}
  ]
}}"""

CONCEPT_MAP_EXPANSION_ES = """Eres un experto educador. Necesito que PROFUNDICES en los siguientes conceptos del tema "{topic}" para estudiantes de {grade} grado de {education_level}.

Conceptos a expandir:
{target_list}

Para CADA concepto, genera 2-3 sub-detalles más específicos con sus definiciones.
Copia el nombre de cada concepto exactamente como aparece arriba en "conceptoOriginal".

Responde SOLO con un JSON válido (sin markdown) con esta estructura:
{{
  "expansiones": [
    {{
      "conceptoOriginal": "Nombre del concepto original",
      "subDetalles": [
        {{
          "nombre": "Sub-detalle específico",
          "descripcion": "Definición clara y educativa"
        }}
      ]
    }}
  ]
}}"""

# ============================================================================
# PROMPT REGISTRY
# ============================================================================

CONCEPT_MAP_PROMPTS = {
    # Format: diagram_type_prompt_type_language
    "concept_map_generation_en": CONCEPT_MAP_GENERATION_EN,
    "concept_map_generation_es": CONCEPT_MAP_GENERATION_ES,
    "concept_map_system_en": CONCEPT_MAP_SYSTEM_EN,
    "concept_map_system_es": CONCEPT_MAP_SYSTEM_ES,
    "concept_map_expansion_en": CONCEPT_MAP_EXPANSION_EN,
    "concept_map_expansion_es": CONCEPT_MAP_EXPANSION_ES,
    "concept_map_expansion_system_en": CONCEPT_MAP_EXPANSION_SYSTEM_EN,
    "concept_map_expansion_system_es": CONCEPT_MAP_EXPANSION_SYSTEM_ES,
}

CONCEPT_MAP_DEPTH_DETAILS = {
    "en": CONCEPT_MAP_DEPTH_DETAILS_EN,
    "es": CONCEPT_MAP_DEPTH_DETAILS_ES,
}
