from httpacket import RequestBuilder

request = (
    RequestBuilder.post('search.php')
        .with_host('http://example.com')
        .with_from('lukebrodowski@gmail.com')
        .with_body('Some sample data.')
)

data = request.to_bytes()
print(request)
