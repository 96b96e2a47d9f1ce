"""Forms for the linkweaver app.

The injection form carries the article, the catalog of link targets and the
optional per-request overrides of the engine options. Validation turns the
free-text target list into ``(title, url)`` pairs the services understand.
"""

from __future__ import annotations

from typing import Any

from django import forms

# Form fields that map one-to-one onto engine options.
OVERRIDE_FIELDS = (
    'min_links',
    'max_links',
    'min_distance_between_links',
    'max_links_per_section',
    'min_quality_score',
    'enable_bridge_sentences',
)


class InjectionForm(forms.Form):
    """Article plus link targets for a single injection run."""

    content = forms.CharField(
        widget=forms.Textarea(
            attrs={
                'rows': 18,
                'placeholder': 'Paste the article HTML you want to enrich...'
            }
        ),
        label='Content',
        help_text='Article body, HTML with <h2> sections and <p> paragraphs.'
    )
    targets = forms.CharField(
        label='Link targets',
        widget=forms.Textarea(
            attrs={
                'rows': 6,
                'placeholder': 'Running for Weight Loss Plan -> https://example.com/running-plan/\nBeginner Strength Training Guide -> /strength/',
            }
        ),
        help_text=(
            'One page per line using "Page title -> https://example.com/page". '
            'Site-relative paths such as /page/ are accepted.'
        ),
    )
    is_html_input = forms.BooleanField(
        required=False,
        initial=True,
        label='Content is HTML',
        help_text='Uncheck for plain text; each line becomes a paragraph.'
    )
    strip_existing_links = forms.BooleanField(
        required=False,
        label='Remove existing links',
        help_text='Strip <a> tags from the content before adding new links.'
    )
    current_url = forms.CharField(
        required=False,
        label='Current page URL',
        help_text='Targets pointing at this page are never linked.'
    )
    min_links = forms.IntegerField(required=False, min_value=0, max_value=100)
    max_links = forms.IntegerField(required=False, min_value=0, max_value=100)
    min_distance_between_links = forms.IntegerField(required=False, min_value=0)
    max_links_per_section = forms.IntegerField(required=False, min_value=0, max_value=25)
    min_quality_score = forms.IntegerField(required=False, min_value=0, max_value=100)
    enable_bridge_sentences = forms.NullBooleanField(required=False)

    def clean_targets(self) -> list[tuple[str, str]]:
        """Parse newline-delimited ``title -> url`` pairs into tuples."""

        raw_value = self.cleaned_data.get('targets', '')
        if not raw_value:
            return []

        url_field = forms.URLField()
        parsed: list[tuple[str, str]] = []
        seen_urls: set[str] = set()
        separators = ('->', '\t')

        for index, line in enumerate(raw_value.splitlines(), start=1):
            candidate = line.strip()
            if not candidate:
                continue
            title_part = None
            url_part = None
            for sep in separators:
                if sep in candidate:
                    title_part, url_part = (piece.strip() for piece in candidate.rsplit(sep, 1))
                    break
            if title_part is None or url_part is None:
                raise forms.ValidationError(
                    f'Target line {index} must include a title and URL separated by ->.'
                )
            if not title_part:
                raise forms.ValidationError(f'Target line {index} is missing a title.')
            if url_part.startswith('/') and not url_part.startswith('//'):
                cleaned_url = url_part
            else:
                try:
                    cleaned_url = url_field.clean(url_part)
                except forms.ValidationError as exc:
                    raise forms.ValidationError(
                        f'Target line {index} has an invalid URL: {exc.messages[0]}'
                    ) from exc
            if cleaned_url in seen_urls:
                continue
            seen_urls.add(cleaned_url)
            parsed.append((title_part, cleaned_url))

        if not parsed:
            raise forms.ValidationError('Provide at least one link target.')
        return parsed

    def overrides(self) -> dict[str, Any]:
        """Engine options the request sets explicitly."""

        return {
            name: self.cleaned_data.get(name)
            for name in OVERRIDE_FIELDS
            if self.cleaned_data.get(name) is not None
        }
