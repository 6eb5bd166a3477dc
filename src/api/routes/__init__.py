"""
API Routes - HTTP endpoint handlers

- blaster: /do, /color and the index page
- system:  /api/v1/system/* diagnostics
"""
