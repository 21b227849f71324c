"""
Catalogue ingestion.

Modules
-------
recipe_loader : load_recipe_file() + parse_recipe_records() + upsert_recipes()
                — JSON recipe seed files into the SQLite catalogue.
"""
