"""
API v1 package initialization
Importing modules explicitly so they can be imported from sellsight.api.v1
"""

from sellsight.api.v1 import analysis, dashboard, export, health, ideas, products, scrape
