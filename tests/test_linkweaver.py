from __future__ import annotations

import textwrap
from unittest.mock import patch

from django.test import Client, SimpleTestCase
from django.urls import reverse

from linkweaver.engine import ConfigError, StructuralError
from linkweaver.forms import InjectionForm
from linkweaver.services import (
    build_targets,
    normalize_slug_from_url,
    run_injection,
    strip_existing_links_from_html,
    verify_text_preserved,
    wrap_plain_text,
)

RUNNING_TITLE = 'Ultimate 2026 Running for Weight Loss Plan: 8-Week Proven Results'
RUNNING_SENTENCE = (
    'Many new runners wonder where to begin. A structured running for weight loss plan guide '
    'helps beginners avoid injury and stay consistent.'
)
ARTICLE = f'<h2>Getting started</h2>\n<p>{RUNNING_SENTENCE}</p>'


class InjectionFormTests(SimpleTestCase):
    def form(self, **overrides):
        data = {
            'content': ARTICLE,
            'targets': f'{RUNNING_TITLE} -> /running-plan/',
            'is_html_input': 'on',
        }
        data.update(overrides)
        return InjectionForm(data)

    def test_targets_parse_arrows_and_tabs(self) -> None:
        form = self.form(targets=textwrap.dedent(
            """
            Primary Page -> https://example.com/primary
            Secondary Page\t/secondary/

            Duplicate Page -> https://example.com/primary
            """
        ).strip())
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(
            form.cleaned_data['targets'],
            [
                ('Primary Page', 'https://example.com/primary'),
                ('Secondary Page', '/secondary/'),
            ],
        )

    def test_targets_require_separator(self) -> None:
        form = self.form(targets='Missing separator line')
        self.assertFalse(form.is_valid())
        self.assertIn('Target line 1', form.errors['targets'][0])

    def test_targets_require_title(self) -> None:
        form = self.form(targets=' -> /page/')
        self.assertFalse(form.is_valid())
        self.assertIn('missing a title', form.errors['targets'][0])

    def test_targets_reject_invalid_urls(self) -> None:
        form = self.form(targets='Some Page -> not a url')
        self.assertFalse(form.is_valid())
        self.assertIn('invalid URL', form.errors['targets'][0])

    def test_overrides_only_include_submitted_options(self) -> None:
        form = self.form(max_links='5', enable_bridge_sentences='false')
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.overrides(), {'max_links': 5, 'enable_bridge_sentences': False})


class ServiceTests(SimpleTestCase):
    def test_strip_existing_links_keeps_text(self) -> None:
        html = '<p>See <a href="/x">this page</a> now.</p>'
        self.assertEqual(strip_existing_links_from_html(html), '<p>See this page now.</p>')

    def test_wrap_plain_text_escapes_lines(self) -> None:
        self.assertEqual(
            wrap_plain_text('Fish & chips\n\n<b>bold</b>'),
            '<p>Fish &amp; chips</p><p>&lt;b&gt;bold&lt;/b&gt;</p>',
        )

    def test_normalize_slug_from_url(self) -> None:
        self.assertEqual(
            normalize_slug_from_url('https://example.com/blog/running-plan_v2/'),
            ('running-plan_v2', 'running plan v2'),
        )
        self.assertEqual(normalize_slug_from_url('https://example.com/'), ('', ''))

    def test_build_targets_takes_slug_from_url(self) -> None:
        targets = build_targets([(RUNNING_TITLE, 'https://example.com/running-plan/')])
        self.assertEqual(targets[0].slug, 'running-plan')
        self.assertEqual(targets[0].title, RUNNING_TITLE)

    def test_verify_text_preserved_ignores_links_and_bridges(self) -> None:
        original = '<p>Hello world.</p>'
        linked = '<p>Hello <a href="/w">world</a>.</p>\n<p class="bridge-sentence">Extra.</p>'
        self.assertTrue(verify_text_preserved(original, linked))
        self.assertFalse(verify_text_preserved(original, '<p>Hello there.</p>'))

    def test_run_injection_wraps_plain_text(self) -> None:
        outcome = run_injection(
            RUNNING_SENTENCE,
            [(RUNNING_TITLE, '/running-plan/')],
            is_html=False,
            overrides={'enable_bridge_sentences': False},
        )
        self.assertTrue(outcome.text_preserved)
        self.assertEqual(len(outcome.result.links_added), 1)
        self.assertTrue(outcome.result.document.startswith('<p>'))
        self.assertIn('href="/running-plan/"', outcome.result.document)

    def test_run_injection_rejects_empty_documents(self) -> None:
        with self.assertRaises(StructuralError):
            run_injection('   ', [(RUNNING_TITLE, '/running-plan/')])


class InjectViewTests(SimpleTestCase):
    def setUp(self) -> None:
        self.client = Client()
        self.url = reverse('linkweaver:inject')

    def payload(self, **overrides):
        data = {
            'content': ARTICLE,
            'targets': f'{RUNNING_TITLE} -> /running-plan/',
            'is_html_input': 'on',
        }
        data.update(overrides)
        return data

    def test_inject_returns_report(self) -> None:
        response = self.client.post(self.url, self.payload())
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body['text_preserved'])
        self.assertEqual(body['links_added'][0]['url'], '/running-plan/')
        self.assertIn('href="/running-plan/"', body['document'])
        self.assertEqual(body['quality_report']['excellent_count'], 1)

    def test_inject_strips_existing_links_when_asked(self) -> None:
        content = f'<h2>Intro</h2>\n<p><a href="/old/">Old link</a> text.</p>\n<p>{RUNNING_SENTENCE}</p>'
        response = self.client.post(self.url, self.payload(content=content, strip_existing_links='on'))
        self.assertEqual(response.status_code, 200)
        self.assertNotIn('/old/', response.json()['document'])

    def test_invalid_targets_return_400(self) -> None:
        response = self.client.post(self.url, self.payload(targets='no separator here'))
        self.assertEqual(response.status_code, 400)
        self.assertIn('targets', response.json()['errors'])

    @patch('linkweaver.views.run_injection', side_effect=StructuralError('document is empty'))
    def test_structural_errors_return_422(self, mock_run) -> None:
        response = self.client.post(self.url, self.payload())
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()['errors']['content'][0]['message'], 'document is empty')
        mock_run.assert_called_once()

    @patch('linkweaver.views.run_injection', side_effect=ConfigError('min_word_count must be at least 1'))
    def test_config_errors_return_400(self, mock_run) -> None:
        response = self.client.post(self.url, self.payload())
        self.assertEqual(response.status_code, 400)
        self.assertIn('config', response.json()['errors'])

    def test_inject_requires_post(self) -> None:
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 405)


class AnchorValidationViewTests(SimpleTestCase):
    def test_scores_phrase(self) -> None:
        response = Client().get(reverse('linkweaver:anchor_validation'), {'phrase': 'running for weight loss'})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body['valid'])
        self.assertEqual(body['score'], 90)
        self.assertEqual(body['tier'], 'excellent')

    def test_rejects_weak_phrase(self) -> None:
        response = Client().get(reverse('linkweaver:anchor_validation'), {'phrase': 'click here now'})
        body = response.json()
        self.assertFalse(body['valid'])
        self.assertEqual(body['tier'], 'rejected')
        self.assertIsNotNone(body['reason'])
