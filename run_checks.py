import os

os.environ.setdefault("USE_MOCK_DB", "true")
os.environ.setdefault("SENTIMENT_PROVIDER", "mock")

from fastapi.testclient import TestClient
from voice2action.main import app

client = TestClient(app)

print('ROOT:')
print(client.get('/').json())

print('\nHEALTH:')
print(client.get('/health').json())

print('\nDB HEALTH:')
resp = client.get('/health/db')
print(resp.status_code, resp.json())

print('\nSUBMIT:')
resp = client.post('/api/issues', json={
    'title': 'Broken streetlight and pothole',
    'description': 'Dangerous road at night near the school',
    'ward_code': 'W-1',
})
print(resp.status_code, resp.json())
tracking_id = resp.json().get('tracking_id')

print('\nTRACK:')
print(client.get(f'/api/issues/track/{tracking_id}').json())

print('\nMETRICS:')
print(client.get('/api/metrics').json())

print('\nBUDGET NEEDS:')
print(client.get('/api/budget/needs').json())
