"""
Tests for the review server routes.
"""

import pytest

from quadmatch.app import create_app
from quadmatch.config import MatchConfig
from quadmatch.scanner import scan_corpus


@pytest.fixture
def scan(sample_images):
    return scan_corpus(
        [sample_images['photo'], sample_images['photo_copy'], sample_images['blue'], sample_images['corrupted']],
        show_progress=False,
    )


@pytest.fixture
def client(scan):
    app = create_app(scan, MatchConfig(), title="Review")
    app.config['TESTING'] = True
    return app.test_client()


class TestReportPage:
    """Tests for the HTML index."""

    def test_index(self, client):
        response = client.get('/')
        assert response.status_code == 200
        page = response.get_data(as_text=True)
        assert '<title>Review</title>' in page
        assert '<div style="display:inline-flex">' in page
        assert 'src="/api/image?path=' in page
        assert 'Skipped files' in page


class TestJsonRoutes:
    """Tests for the JSON API."""

    def test_ping(self, client):
        assert client.get('/api/ping').get_json()['status'] == 'ok'

    def test_groups(self, client, sample_images):
        groups = client.get('/api/groups').get_json()
        assert len(groups) == 1
        paths = {img['path'] for img in groups[0]['images']}
        assert paths == {sample_images['photo'], sample_images['photo_copy']}

    def test_images(self, client):
        images = client.get('/api/images').get_json()
        assert len(images) == 3
        assert all(img['path'] in img['matches'] for img in images)

    def test_failures(self, client, sample_images):
        failures = client.get('/api/failures').get_json()
        assert [f['path'] for f in failures] == [sample_images['corrupted']]

    def test_config(self, client):
        assert client.get('/api/config').get_json()['similarity_threshold'] == 0.85


class TestImageRoute:
    """Tests for serving image files."""

    def test_serves_scanned_image(self, client, sample_images):
        response = client.get('/api/image', query_string={'path': sample_images['photo']})
        assert response.status_code == 200
        assert response.mimetype == 'image/jpeg'
        response.close()

    def test_requires_path(self, client):
        assert client.get('/api/image').status_code == 400

    def test_rejects_files_outside_scan(self, client, sample_images):
        response = client.get('/api/image', query_string={'path': sample_images['red_small']})
        assert response.status_code == 403

    def test_missing_file(self, client, sample_images, temp_dir):
        (temp_dir / "photo_copy.jpg").unlink()
        response = client.get('/api/image', query_string={'path': sample_images['photo_copy']})
        assert response.status_code == 404
