"""survey_runner — command-line front end for the survey autofill SDK.

Wires the SDK to the Playwright collaborators, reads process settings from
the environment, and exposes the ``survey-autofill`` console script.
"""
