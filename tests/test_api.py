def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_list_games_empty(client):
    res = client.get('/api/games')
    assert res.status_code == 200
    assert res.get_json() == []


def test_list_and_describe_game(flask_app, client):
    coordinator = flask_app.extensions['coordinator']
    older = coordinator.handle_create('sid-1', 'Older', 'white')
    newer = coordinator.handle_create('sid-2', 'Newer', 'black')

    listing = client.get('/api/games').get_json()
    assert [row['id'] for row in listing] == [newer, older]
    assert listing[0]['blackOccupied'] is True
    assert listing[0]['whiteOccupied'] is False

    res = client.get(f'/api/games/{older}')
    assert res.status_code == 200
    game = res.get_json()
    assert game['name'] == 'Older'
    assert game['state']['status'] == 'waiting'
    assert game['state']['moveLog'] == []
    assert game['state']['position'].startswith('rnbqkbnr/pppppppp')


def test_unknown_game_is_404(client):
    res = client.get('/api/games/nope')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Game not found'}
