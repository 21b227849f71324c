"""
Analytical engine: pure, in-memory calculations over a catalogue snapshot.

Every operation takes the full recipe list and the full material-line list
(plus an inventory where relevant) and returns plain result models. Nothing
here touches the database or the filesystem.

Modules
-------
normalize      : normalize_key() + build_inventory() + type/profile parsing.
feasibility    : compute_feasibility() + analyze_potential_crafts().
profitability  : rank_by_profitability().
profile_filter : filter_by_material_profile().
usage          : summarize_usage().
catalogue_view : attach_materials() + recipes_using_material().
errors         : InvalidInventory, InvalidProfile.
"""
