import random


def submit(client, **body):
    return client.post('/api/score', json=body)


def test_status(client):
    res = client.get('/api/status')
    assert res.status_code == 200
    data = res.get_json()
    assert data['status'] == 'ok'
    assert data['version'] == '1.0.0'
    assert data['storage'] == 'memory'
    assert any(e['path'] == '/api/score' for e in data['endpoints'])


def test_health_reports_store_state(client):
    res = client.get('/health')
    assert res.status_code == 200
    data = res.get_json()
    assert data['status'] == 'healthy'
    assert data['storeConnected'] is False
    assert data['storage'] == 'memory'
    assert data['uptime'] >= 0
    assert data['timestamp'].endswith('Z')
    assert 'maxRssKb' in data['memoryUsage']


def test_submit_requires_name_and_time(client):
    for body in ({'time': 10}, {'name': 'Al'}, {}):
        res = client.post('/api/score', json=body)
        assert res.status_code == 400
        data = res.get_json()
        assert data['required'] == ['name', 'time']
        assert data['received'] == body


def test_submit_without_json_body(client):
    res = client.post('/api/score', data='not json', content_type='text/plain')
    assert res.status_code == 400
    assert res.get_json()['required'] == ['name', 'time']


def test_submit_rejects_non_numeric_time(client):
    res = submit(client, name='Al', time='fast')
    assert res.status_code == 400
    assert res.get_json()['field'] == 'time'


def test_submit_defaults_accuracy_in_memory(client):
    res = submit(client, name='Al', time=12.5)
    assert res.status_code == 201
    data = res.get_json()
    assert data['success'] is True
    assert data['storage'] == 'memory'
    assert data['data']['accuracy'] == 100
    assert data['data']['time'] == 12.5
    assert data['rank'] == 1
    assert data['totalPlayers'] == 1


def test_numeric_strings_are_accepted(client):
    data = submit(client, name='Al', time='9.75', accuracy='88').get_json()
    assert data['data']['time'] == 9.75
    assert data['data']['accuracy'] == 88.0


def test_rank_follows_ascending_time(client):
    assert submit(client, name='slow', time=30).get_json()['rank'] == 1
    assert submit(client, name='fast', time=10).get_json()['rank'] == 1
    middle = submit(client, name='mid', time=20).get_json()
    assert middle['rank'] == 2
    assert middle['totalPlayers'] == 3

    board = client.get('/api/leaderboard').get_json()['leaderboard']
    assert [e['name'] for e in board] == ['fast', 'mid', 'slow']


def test_memory_leaderboard_keeps_fifty_fastest(client):
    times = list(range(1, 52))
    random.Random(7).shuffle(times)
    for t in times:
        assert submit(client, name=f'p{t}', time=t).status_code == 201

    data = client.get('/api/leaderboard?limit=50').get_json()
    assert data['count'] == 50
    assert [e['time'] for e in data['leaderboard']] == [float(t) for t in range(1, 51)]


def test_empty_leaderboard_message(client):
    data = client.get('/api/leaderboard').get_json()
    assert data['leaderboard'] == []
    assert data['count'] == 0
    assert data['message'].startswith('No records yet')


def test_clear_then_read(client):
    submit(client, name='Al', time=12.5)
    res = client.delete('/api/leaderboard')
    assert res.status_code == 200
    cleared = res.get_json()
    assert cleared['success'] is True
    assert cleared['storage'] == 'memory'

    data = client.get('/api/leaderboard').get_json()
    assert data['leaderboard'] == []
    assert data['count'] == 0


def test_name_is_truncated(client):
    data = submit(client, name='x' * 35, time=5).get_json()
    assert data['data']['name'] == 'x' * 20
    board = client.get('/api/leaderboard').get_json()['leaderboard']
    assert board[0]['name'] == 'x' * 20


def test_identical_submissions_are_distinct(client):
    submit(client, name='Al', time=12.5)
    submit(client, name='Al', time=12.5)
    assert client.get('/api/leaderboard').get_json()['count'] == 2


def test_leaderboard_limit_is_clamped(client):
    for t in range(1, 26):
        submit(client, name=f'p{t}', time=t)
    assert len(client.get('/api/leaderboard').get_json()['leaderboard']) == 20
    assert len(client.get('/api/leaderboard?limit=5').get_json()['leaderboard']) == 5
    assert len(client.get('/api/leaderboard?limit=0').get_json()['leaderboard']) == 1
    assert len(client.get('/api/leaderboard?limit=abc').get_json()['leaderboard']) == 20
    assert len(client.get('/api/leaderboard?limit=500').get_json()['leaderboard']) == 25


def test_unknown_route_returns_404_body(client):
    res = client.get('/nope?x=1')
    assert res.status_code == 404
    data = res.get_json()
    assert data['path'] == '/nope?x=1'
    assert data['method'] == 'GET'
    assert 'POST /api/score' in data['availableEndpoints']


def test_wrong_method_reported_as_404(client):
    res = client.put('/api/leaderboard')
    assert res.status_code == 404
    assert res.get_json()['method'] == 'PUT'


def test_unexpected_error_returns_500_with_stack(client, leaderboard, monkeypatch):
    def explode(limit=None):
        raise RuntimeError('kaboom')

    monkeypatch.setattr(leaderboard, 'read', explode)
    res = client.get('/api/leaderboard')
    assert res.status_code == 500
    data = res.get_json()
    assert data['error'] == 'Server error'
    assert data['message'] == 'kaboom'
    assert 'RuntimeError' in data['stack']


def test_cors_headers(client):
    res = client.get('/api/status', headers={'Origin': 'http://example.com'})
    assert res.headers.get('Access-Control-Allow-Origin') == '*'


def test_score_missing_the_cap_reports_rank_zero(client):
    for t in range(1, 51):
        submit(client, name=f'p{t}', time=t)
    data = submit(client, name='late', time=99).get_json()
    assert data['rank'] == 0
    assert data['totalPlayers'] == 50


def test_cors_restricted_origins(make_app):
    restricted = make_app(CORS_ORIGINS=['http://localhost:5173']).test_client()
    allowed = restricted.get('/api/status', headers={'Origin': 'http://localhost:5173'})
    assert allowed.headers.get('Access-Control-Allow-Origin') == 'http://localhost:5173'
    denied = restricted.get('/api/status', headers={'Origin': 'http://example.com'})
    assert 'Access-Control-Allow-Origin' not in denied.headers


def test_health_without_resource_module(client, monkeypatch):
    from keyboard_challenge import main as main_module

    monkeypatch.setattr(main_module, 'resource', None)
    data = client.get('/health').get_json()
    assert data['memoryUsage']['maxRssKb'] is None
    assert data['memoryUsage']['gcObjects'] > 0
