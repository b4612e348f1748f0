from gridclaim import create_app, socketio

# Country data is off by default: every player reports Unknown until a
# lookup is passed in, e.g. create_app(country_lookup=lambda ip: reader.country(ip))
app = create_app()

if __name__ == '__main__':
    # Use SocketIO server to enable websockets in dev
    socketio.run(app, host=app.config['HOST'], port=app.config['PORT'], debug=True)
