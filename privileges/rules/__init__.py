"""
Delegation rules package.

Defines the least-privilege token used to narrow a subject's privilege,
together with the rule and decision models shared with the checker.

Modules of interest:
- models: Rule keys, effects, token matches and decisions.
- token: The nine-key wildcard matcher with ban-dominant semantics.
"""
