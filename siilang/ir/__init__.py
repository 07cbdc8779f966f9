"""Intermediate representation: types, values, codes, a code builder and basic groups."""