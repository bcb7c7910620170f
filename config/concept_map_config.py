"""
Concept Map Configuration
=========================

Layout constants, palette and education tables that are specific to the
concept map diagram. These values are process-wide constants: nothing in the
application mutates them at runtime.

Author: ConceptGraph Team
"""

# ============================================================================
# LAYOUT PARAMETERS (horizontal tree)
# ============================================================================

# Horizontal distance between two consecutive depth levels (pixels)
LEVEL_GAP = 320

# Vertical space one rendered node occupies, padding included (pixels)
NODE_UNIT = 140

# Vertical gap between two sibling subtrees (pixels)
SIBLING_GAP = 45

# Top-level branches are separated by SIBLING_GAP * BRANCH_GAP_FACTOR
BRANCH_GAP_FACTOR = 2.5

# Horizontal position of the root node
ORIGIN_X = 50

# Widest rendered box, used for canvas dimension hints
NODE_WIDTH = 320

# Canvas margin around the diagram (pixels)
CANVAS_PADDING = 80

# ============================================================================
# COLORS
# ============================================================================

ROOT_COLOR = '#6366f1'

# Indexed by top-level branch position modulo its length
BRANCH_COLORS = (
    '#c0392b', '#2980b9', '#27ae60', '#8e44ad', '#d35400',
    '#16a085', '#c71585', '#00838f', '#558b2f', '#e65100',
)

# ============================================================================
# RELATION LABELS
# ============================================================================

DEFAULT_CONCEPT_RELATION = 'has'
DEFAULT_SUBCONCEPT_RELATION = 'includes'
DEFAULT_DETAIL_RELATION = 'example'
DEFAULT_EXPANSION_RELATION = 'includes'

# ============================================================================
# EDUCATION LEVELS
# ============================================================================

# Grades offered per education level. Initial education is expressed in
# years of age, primary and secondary in school grades.
GRADES_BY_LEVEL = {
    'initial': (3, 4, 5),
    'primary': (1, 2, 3, 4, 5, 6),
    'secondary': (1, 2, 3, 4, 5),
}

# ============================================================================
# LLM CALL PARAMETERS
# ============================================================================

# Generation answers carry nested sub-concepts and examples
CONCEPT_MAP_MAX_TOKENS = 2000

# Expansion answers are short lists of details
EXPANSION_MAX_TOKENS = 2000

CONCEPT_MAP_TEMPERATURE = 0.7
