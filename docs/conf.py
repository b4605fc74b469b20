# docs/conf.py
# Sphinx configuration for hdframe documentation build
# Exists so docs match current release metadata and extensions
# RELEVANT FILES:docs/index.md,pyproject.toml,README.md
# Configuration file for the Sphinx documentation builder.

import sys
import os

# Add Python source to path for autodoc
sys.path.insert(0, os.path.abspath('../python'))

project = 'hdframe'
copyright = '2025, hdframe contributors'
author = 'hdframe contributors'

# The short X.Y version
version = '0.3.0'
# The full version, including alpha/beta/rc tags
release = '0.3.0'

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.autosummary',
    'sphinx.ext.viewcode',
    'sphinx.ext.napoleon',
    'sphinx.ext.intersphinx',
    'myst_parser',  # For Markdown support
]

source_suffix = {
    '.rst': None,
    '.md': None,
}

# Napoleon settings for Google/NumPy docstring styles
napoleon_google_docstring = True
napoleon_numpy_docstring = True
napoleon_include_init_with_doc = False

autodoc_default_options = {
    'members': True,
    'member-order': 'bysource',
    'undoc-members': True,
    'exclude-members': '__weakref__'
}

autosummary_generate = True
autosummary_imported_members = True

intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
    'numpy': ('https://numpy.org/doc/stable/', None),
}

exclude_patterns = [
    '_build',
    'Thumbs.db',
    '.DS_Store',
    '__pycache__',
]

html_theme = 'sphinx_rtd_theme'

html_theme_options = {
    'collapse_navigation': False,
    'navigation_depth': 3,
}

# Only include when the directory exists to avoid warnings.
_HERE = os.path.dirname(__file__)
_STATIC_DIR = os.path.join(_HERE, '_static')
if os.path.isdir(_STATIC_DIR):
    html_static_path = ['_static']
else:
    html_static_path = []

html_title = 'hdframe Documentation'
html_short_title = 'hdframe'
