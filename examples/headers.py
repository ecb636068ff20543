from httpacket import RequestBuilder, Settings

settings = Settings(protocol='HTTP/1.0', user_agent='httpacket-example/0.1')

request = (
    RequestBuilder.get('/search?q=packets', settings=settings)
        .with_host('example.com')
        .with_header('Accept', 'text/html')
        .with_header('accept', 'application/json')
)

print(request.headers)
print(request.to_text())
