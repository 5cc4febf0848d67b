"""
Tests for site content, categories, icons, videos and uploads.
"""

import io

import pytest
from faker import Faker

from app import db
from app.models import SiteContent
from app.services import content as content_service
from app.services import storage
from app.services.errors import NotFoundError, PersistenceError, ValidationError

fake = Faker()

SUPABASE_URL = 'https://project.supabase.co'
PNG_BYTES = b'\x89PNG\r\n\x1a\n' + b'\x00' * 32


class FakeBucket:
    def __init__(self):
        self.uploaded = []
        self.removed = []

    def upload(self, path, file, file_options=None):
        self.uploaded.append(path)

    def get_public_url(self, path):
        return f'{SUPABASE_URL}/storage/v1/object/public/bucket/{path}'

    def list(self, folder):
        return [{'name': 'main.jpg'}]

    def remove(self, paths):
        self.removed.extend(paths)


class FakeStorage:
    def __init__(self):
        self.buckets = {}

    def from_(self, bucket):
        return self.buckets.setdefault(bucket, FakeBucket())


class FakeSupabase:
    def __init__(self):
        self.storage = FakeStorage()


@pytest.fixture
def fake_supabase(monkeypatch):
    client = FakeSupabase()
    monkeypatch.setenv('SUPABASE_URL', SUPABASE_URL)
    monkeypatch.setattr(storage, '_supabase_client', client)
    return client


def add_content(content_type='banner', order=0, active=True, **extra):
    return content_service.create_content({
        'type': content_type,
        'title': fake.sentence(nb_words=3),
        'order': order,
        'active': active,
        **extra
    })


class TestContentService:
    """Tests for the site content functions."""

    def test_get_content_ordered_and_active(self, db_session):
        second = add_content(order=2)
        first_a = add_content(order=1)
        first_b = add_content(order=1)
        add_content(order=0, active=False)
        add_content('category', order=0)

        ids = [c['id'] for c in content_service.get_content('banner')]

        assert ids == [first_a, first_b, second]

    def test_get_content_invalid_type(self, db_session):
        with pytest.raises(ValidationError):
            content_service.get_content('video')

    def test_create_content_requires_title(self, db_session):
        with pytest.raises(ValidationError):
            content_service.create_content({'type': 'banner'})

    def test_update_content_metadata(self, db_session):
        content_id = add_content(metadata={'icon': 'old'})

        content = content_service.update_content(content_id, {'metadata': {'icon': 'new'}, 'order': 5})

        assert content['metadata'] == {'icon': 'new'}
        assert content['order'] == 5

    def test_delete_content(self, db_session):
        content_id = add_content()

        content_service.delete_content(content_id)

        assert db.session.get(SiteContent, content_id) is None

    def test_delete_missing_content(self, db_session):
        with pytest.raises(NotFoundError):
            content_service.delete_content(12345)


class TestCategoryService:
    """Tests for the category functions."""

    def test_create_category_defaults(self, db_session):
        category_id = content_service.create_category({'title': 'Elevação', 'type': 'banner'})

        category = db.session.get(SiteContent, category_id)
        assert category.type == 'category'
        assert category.order == 0
        assert category.active is True

    def test_update_category_keeps_type(self, test_category):
        category = content_service.update_category(test_category, {'type': 'banner', 'title': 'Novo'})

        assert category['type'] == 'category'
        assert category['title'] == 'Novo'

    def test_delete_category_removes_uploaded_image(self, test_category, fake_supabase):
        image_url = f'{SUPABASE_URL}/storage/v1/object/public/content/categories/{test_category}/banner_1.png'
        content_service.update_category(test_category, {'image_url': image_url})

        content_service.delete_category(test_category)

        assert fake_supabase.storage.from_('content').removed == [f'categories/{test_category}/banner_1.png']
        assert db.session.get(SiteContent, test_category) is None

    def test_delete_category_with_external_image(self, test_category):
        content_service.update_category(test_category, {'image_url': 'https://images.unsplash.com/photo-1'})

        content_service.delete_category(test_category)

        assert db.session.get(SiteContent, test_category) is None

    def test_delete_category_image_failure_keeps_record(self, test_category, monkeypatch):
        monkeypatch.setenv('SUPABASE_URL', SUPABASE_URL)
        monkeypatch.setattr(storage, '_supabase_client', None)
        image_url = f'{SUPABASE_URL}/storage/v1/object/public/content/categories/x.png'
        content_service.update_category(test_category, {'image_url': image_url})

        with pytest.raises(PersistenceError):
            content_service.delete_category(test_category)

        assert db.session.get(SiteContent, test_category) is not None


class TestIconsAndVideos:
    """Tests for category icons and product videos."""

    def test_update_category_icon(self, test_icon):
        icon = content_service.update_category_icon(test_icon, {'icon': 'excavator', 'order': 3})

        assert icon['icon'] == 'excavator'
        assert content_service.get_category_icons()[0]['order'] == 3

    def test_product_video_lifecycle(self, test_machine):
        first = content_service.add_product_video(test_machine['id'], {
            'title': 'Demo', 'video_url': 'https://videos.example.com/1.mp4', 'order': 2
        })
        second = content_service.add_product_video(test_machine['id'], {
            'title': 'Manutenção', 'video_url': 'https://videos.example.com/2.mp4', 'order': 1
        })

        assert [v['id'] for v in content_service.get_product_videos(test_machine['id'])] == [second, first]

        content_service.update_product_video(first, {'order': 0})
        assert content_service.get_product_videos(test_machine['id'])[0]['id'] == first

        content_service.delete_product_video(first)
        assert len(content_service.get_product_videos(test_machine['id'])) == 1

    def test_video_for_missing_machine(self, db_session):
        with pytest.raises(NotFoundError):
            content_service.add_product_video('missing', {'title': 'x', 'video_url': 'y'})


class TestContentRoutes:
    """Tests for /api/content and /api/categories"""

    def test_get_banners(self, client, db_session):
        add_content(order=1)

        response = client.get('/api/content?type=banner')

        assert response.status_code == 200
        assert response.json['total'] == 1

    def test_get_content_invalid_type(self, client, db_session):
        response = client.get('/api/content?type=nope')

        assert response.status_code == 400

    def test_create_update_delete_content(self, client, auth_headers, db_session):
        created = client.post('/api/content', json={'type': 'phase', 'title': 'Fundação'}, headers=auth_headers)
        assert created.status_code == 201
        content_id = created.json['id']

        updated = client.put(f'/api/content/{content_id}', json={'active': False}, headers=auth_headers)
        assert updated.status_code == 200
        assert updated.json['content']['active'] is False

        deleted = client.delete(f'/api/content/{content_id}', headers=auth_headers)
        assert deleted.status_code == 200

    def test_create_content_non_object_body(self, client, auth_headers, db_session):
        response = client.post('/api/content', json=['banner'], headers=auth_headers)

        assert response.status_code == 400

    def test_get_categories(self, client, test_category):
        response = client.get('/api/categories')

        assert response.status_code == 200
        assert response.json['categories'][0]['machines'] == ['Escavadeiras', 'Retroescavadeiras']

    def test_create_category_route(self, client, auth_headers, db_session):
        response = client.post('/api/categories', json={'title': 'Ferramentas'}, headers=auth_headers)

        assert response.status_code == 201

    def test_update_missing_category(self, client, auth_headers, db_session):
        response = client.put('/api/categories/999', json={'title': 'x'}, headers=auth_headers)

        assert response.status_code == 404

    def test_machine_videos_route(self, client, auth_headers, test_machine):
        created = client.post(
            f'/api/machines/{test_machine["id"]}/videos',
            json={'title': 'Demo', 'video_url': 'https://videos.example.com/1.mp4'},
            headers=auth_headers
        )
        assert created.status_code == 201

        response = client.get(f'/api/machines/{test_machine["id"]}/videos')
        assert response.json['total'] == 1


class TestUploads:
    """Tests for /api/uploads"""

    def test_upload_machine_image(self, client, auth_headers, test_machine, fake_supabase):
        response = client.post(
            f'/api/uploads/machine-image/{test_machine["id"]}',
            data={'file': (io.BytesIO(PNG_BYTES), 'photo.png')},
            headers=auth_headers,
            content_type='multipart/form-data'
        )

        assert response.status_code == 201
        machine = client.get(f'/api/machines/{test_machine["id"]}').json
        assert machine['image_url'] == response.json['url']
        assert machine['photos']['gallery'] == [response.json['url']]

    def test_upload_rejects_fake_image(self, client, auth_headers, test_machine, fake_supabase):
        response = client.post(
            f'/api/uploads/machine-image/{test_machine["id"]}',
            data={'file': (io.BytesIO(b'not really an image'), 'photo.png')},
            headers=auth_headers,
            content_type='multipart/form-data'
        )

        assert response.status_code == 400

    def test_upload_without_storage(self, client, auth_headers, db_session, monkeypatch):
        monkeypatch.delenv('SUPABASE_URL', raising=False)
        monkeypatch.setattr(storage, '_supabase_client', None)

        response = client.post(
            '/api/uploads/content-image',
            data={'file': (io.BytesIO(PNG_BYTES), 'banner.png'), 'folder': 'banner'},
            headers=auth_headers,
            content_type='multipart/form-data'
        )

        assert response.status_code == 500

    def test_upload_category_image(self, client, auth_headers, test_category, fake_supabase):
        response = client.post(
            f'/api/uploads/category-image/{test_category}',
            data={'file': (io.BytesIO(PNG_BYTES), 'banner.png')},
            headers=auth_headers,
            content_type='multipart/form-data'
        )

        assert response.status_code == 201
        assert db.session.get(SiteContent, test_category).image_url == response.json['url']
