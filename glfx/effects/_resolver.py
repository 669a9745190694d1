def find_best_section(effect, requested_key):
    """Get the section of the effect that best matches the requested key.

    A section matches if the requested key starts with the section key
    (case-insensitive). The longest matching key wins, and among keys of
    equal length the first defined one. Returns None if no section matches.
    """
    requested_key = requested_key.lower()
    closest_match = None
    for section in effect.sections.values():
        # find longest matching section key
        if requested_key.startswith(section.key.lower()):
            if closest_match is None or len(section.key) > len(closest_match.key):
                closest_match = section
    return closest_match
